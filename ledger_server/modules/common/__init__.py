"""Shared abstractions used across ledger modules."""

from .exceptions import (
    AlreadyProcessedError,
    InsufficientBalanceError,
    InvalidAmountError,
    LedgerError,
    MissingOwnerReferenceError,
    NotFoundError,
    PermissionDeniedError,
    TransientIOError,
)
from .models import PartialFailure

__all__ = [
    "AlreadyProcessedError",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "LedgerError",
    "MissingOwnerReferenceError",
    "NotFoundError",
    "PartialFailure",
    "PermissionDeniedError",
    "TransientIOError",
]
