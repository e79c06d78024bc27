"""Sponsor purchase exceptions."""

from ledger_server.modules.common.exceptions import InvalidAmountError


class UnknownPlanError(InvalidAmountError):
    """Raised when the requested level matches no plan."""

    code = "unknown_plan"
