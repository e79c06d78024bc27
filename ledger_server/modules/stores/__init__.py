"""Owner stores and their sponsor-relevant fields."""

from .exceptions import (
    InvalidBonusSettingError,
    StoreAlreadyRegisteredError,
    StoreNotFoundError,
    StoreOwnershipError,
)
from .models import Store, StoreCreateInput, is_sponsor_active
from .service import StoreService

__all__ = [
    "InvalidBonusSettingError",
    "Store",
    "StoreAlreadyRegisteredError",
    "StoreCreateInput",
    "StoreNotFoundError",
    "StoreOwnershipError",
    "StoreService",
    "is_sponsor_active",
]
