"""Reward orders and the point compensations tied to their status."""

from .exceptions import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
)
from .models import (
    ALLOWED_TRANSITIONS,
    CANCELLED,
    COMPLETED,
    ORDER_STATUSES,
    PENDING,
    PROCESSING,
    Order,
    OrderStatusChange,
    Product,
    can_transition,
)
from .service import OrderService

__all__ = [
    "ALLOWED_TRANSITIONS",
    "CANCELLED",
    "COMPLETED",
    "ORDER_STATUSES",
    "PENDING",
    "PROCESSING",
    "InvalidStatusTransitionError",
    "Order",
    "OrderNotFoundError",
    "OrderService",
    "OrderStatusChange",
    "OutOfStockError",
    "Product",
    "ProductNotFoundError",
    "can_transition",
]
