"""SQLAlchemy-backed repository implementations."""

from .account_repository import SqlAccountRepository
from .bonus_repository import SqlBonusRepository
from .charge_repository import SqlChargeRepository
from .member_repository import SqlMemberRepository
from .notification_repository import SqlNotificationRepository
from .order_repository import SqlOrderRepository
from .sponsor_repository import SqlSponsorPaymentRepository
from .store_repository import SqlStoreRepository
from .wallet_repository import SqlWalletRepository

__all__ = [
    "SqlAccountRepository",
    "SqlBonusRepository",
    "SqlChargeRepository",
    "SqlMemberRepository",
    "SqlNotificationRepository",
    "SqlOrderRepository",
    "SqlSponsorPaymentRepository",
    "SqlStoreRepository",
    "SqlWalletRepository",
]
