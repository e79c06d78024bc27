"""Account domain specific exceptions."""

from ledger_server.modules.common.exceptions import LedgerError, NotFoundError


class AccountError(LedgerError):
    """Base class for account domain errors."""

    code = "account_error"


class AccountAlreadyExistsError(AccountError):
    """Raised when attempting to create an account with duplicate username."""

    code = "account_exists"


class AccountNotFoundError(AccountError, NotFoundError):
    """Raised when the requested account cannot be found."""

    code = "not_found"
