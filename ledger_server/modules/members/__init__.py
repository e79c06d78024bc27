"""End-user members and their personal point balances."""

from .exceptions import MemberNotFoundError
from .models import ADMIN_DEDUCT, ADMIN_GIVE, REFUND, USE, VISIT_BONUS, Member, PointEntry
from .service import MemberService

__all__ = [
    "ADMIN_DEDUCT",
    "ADMIN_GIVE",
    "REFUND",
    "USE",
    "VISIT_BONUS",
    "Member",
    "MemberNotFoundError",
    "MemberService",
    "PointEntry",
]
