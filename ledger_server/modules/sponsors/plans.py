"""Priority plans an owner can buy for a store."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import UnknownPlanError


@dataclass(slots=True, frozen=True)
class SponsorPlan:
    level: int
    label: str
    price: int
    weight: int


PRIORITY_PLANS: tuple[SponsorPlan, ...] = (
    SponsorPlan(level=1, label="Basic", price=10000, weight=1),
    SponsorPlan(level=2, label="Premium", price=30000, weight=2),
    SponsorPlan(level=3, label="VIP", price=50000, weight=3),
)


def get_plan(level: int) -> SponsorPlan:
    for plan in PRIORITY_PLANS:
        if plan.level == level:
            return plan
    raise UnknownPlanError(f"Unknown sponsor level: {level!r}")
