"""Member domain exceptions."""

from ledger_server.modules.common.exceptions import NotFoundError


class MemberNotFoundError(NotFoundError):
    """Raised when a member id does not resolve."""
