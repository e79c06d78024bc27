"""Sponsor level purchases paid from owner wallets."""

from .exceptions import UnknownPlanError
from .models import SponsorActivation, SponsorPayment
from .plans import PRIORITY_PLANS, SponsorPlan, get_plan
from .service import SponsorService

__all__ = [
    "PRIORITY_PLANS",
    "SponsorActivation",
    "SponsorPayment",
    "SponsorPlan",
    "SponsorService",
    "UnknownPlanError",
    "get_plan",
]
