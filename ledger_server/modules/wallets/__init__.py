"""Owner wallet ledger."""

from .models import (
    ADMIN_DEDUCT,
    ADMIN_GIVE,
    CHARGE_APPROVED,
    SPONSOR_LEVEL,
    VISIT_BONUS,
    Reconciliation,
    WalletSnapshot,
    WalletTransactionRecord,
)
from .service import WalletService

__all__ = [
    "ADMIN_DEDUCT",
    "ADMIN_GIVE",
    "CHARGE_APPROVED",
    "SPONSOR_LEVEL",
    "VISIT_BONUS",
    "Reconciliation",
    "WalletService",
    "WalletSnapshot",
    "WalletTransactionRecord",
]
