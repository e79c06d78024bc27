"""Charge workflow exceptions."""

from ledger_server.modules.common.exceptions import NotFoundError


class ChargeNotFoundError(NotFoundError):
    """Raised when a charge request id does not resolve."""
