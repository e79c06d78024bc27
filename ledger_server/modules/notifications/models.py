"""Domain models for notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Notification:
    id: str
    recipient_id: str
    title: str
    message: str
    read: bool
    created_at: Optional[datetime] = None
