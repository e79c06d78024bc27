"""Domain models for reward orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ledger_server.modules.common.models import PartialFailure

PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
CANCELLED = "cancelled"
ORDER_STATUSES = (PENDING, PROCESSING, COMPLETED, CANCELLED)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({PROCESSING, CANCELLED}),
    PROCESSING: frozenset({PENDING, COMPLETED, CANCELLED}),
    COMPLETED: frozenset({PROCESSING, PENDING}),
    CANCELLED: frozenset({PENDING}),
}

# Products whose id starts with this prefix are built-in rewards without stock.
SYNTHETIC_PRODUCT_PREFIX = "default_"


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def is_stocked_product(product_id: Optional[str]) -> bool:
    return bool(product_id) and not product_id.startswith(SYNTHETIC_PRODUCT_PREFIX)


@dataclass(slots=True)
class Product:
    id: str
    name: str
    point_cost: int
    stock: int
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class Order:
    id: str
    user_id: Optional[str]
    user_nickname: Optional[str]
    product_id: Optional[str]
    product_name: Optional[str]
    point_cost: int
    status: str
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(slots=True)
class OrderStatusChange:
    order: Order
    previous_status: str
    refunded: int = 0
    redebited: int = 0
    restocked: bool = False
    warnings: list[PartialFailure] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
