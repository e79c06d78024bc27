"""Store domain exceptions."""

from ledger_server.modules.common.exceptions import (
    AlreadyProcessedError,
    InvalidAmountError,
    NotFoundError,
    PermissionDeniedError,
)


class StoreNotFoundError(NotFoundError):
    """Raised when a store id does not resolve."""


class StoreOwnershipError(PermissionDeniedError):
    """Raised when an owner acts on a store registered to someone else."""


class StoreAlreadyRegisteredError(AlreadyProcessedError):
    """Raised when the place is already registered by some owner."""

    code = "store_exists"


class InvalidBonusSettingError(InvalidAmountError):
    """Raised for negative bonus point settings."""
