"""Error taxonomy shared by every ledger module.

Guard violations are raised before anything is written; callers report them
and move on. ``PartialFailure`` is not an exception, see ``models.py``.
"""


class LedgerError(Exception):
    """Base class for ledger domain errors."""

    code = "ledger_error"


class NotFoundError(LedgerError):
    """Raised when a referenced record does not exist."""

    code = "not_found"


class AlreadyProcessedError(LedgerError):
    """Raised when a state guard trips; retrying will not help."""

    code = "already_processed"


class InsufficientBalanceError(LedgerError):
    """Raised when a debit would take a balance below zero."""

    code = "insufficient_balance"

    def __init__(self, account_id: str, required: int, available: int) -> None:
        self.account_id = account_id
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient balance for {account_id}: required {required}P, available {available}P"
        )


class MissingOwnerReferenceError(LedgerError):
    """Raised when a record cannot be tied to a wallet owner."""

    code = "missing_owner_reference"


class InvalidAmountError(LedgerError):
    """Raised for non-positive or out-of-range point amounts."""

    code = "invalid_amount"


class PermissionDeniedError(LedgerError):
    """Raised when the acting account does not own the target record."""

    code = "permission_denied"


class TransientIOError(LedgerError):
    """Raised when the backing store is unreachable; outcome of writes is unknown."""

    code = "transient_io"
