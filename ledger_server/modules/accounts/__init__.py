"""Account domain services and models."""

from .exceptions import AccountAlreadyExistsError, AccountError, AccountNotFoundError
from .models import ADMIN_ROLES, OWNER_ROLE, Account, AccountCreateInput
from .service import AccountService

__all__ = [
    "ADMIN_ROLES",
    "OWNER_ROLE",
    "Account",
    "AccountCreateInput",
    "AccountService",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
]
