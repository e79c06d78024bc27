"""Result types shared across modules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class PartialFailure:
    """A compensating step that did not happen after its primary action committed.

    Carries enough context for someone to replay the step by hand.
    """

    action: str
    account_id: str
    amount: int
    reason: str

    def describe(self) -> str:
        return f"{self.action} of {self.amount} for {self.account_id} needs manual correction: {self.reason}"
