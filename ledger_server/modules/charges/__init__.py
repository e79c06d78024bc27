"""Owner charge requests and their admin approval."""

from .exceptions import ChargeNotFoundError
from .models import (
    CHARGE_OPTIONS,
    COMPLETED,
    PENDING,
    REJECTED,
    ChargeApproval,
    ChargeConfig,
    ChargeRequest,
    compute_fee,
)
from .service import ChargeService

__all__ = [
    "CHARGE_OPTIONS",
    "COMPLETED",
    "PENDING",
    "REJECTED",
    "ChargeApproval",
    "ChargeConfig",
    "ChargeNotFoundError",
    "ChargeRequest",
    "ChargeService",
    "compute_fee",
]
