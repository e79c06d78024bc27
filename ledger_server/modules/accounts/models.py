"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

OWNER_ROLE = "owner"
ADMIN_ROLES = frozenset({"admin", "super_admin"})


@dataclass(slots=True)
class Account:
    id: str
    username: str
    role: str
    is_active: bool
    password_hash: str = field(repr=False)
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def is_owner(self) -> bool:
        return self.role == OWNER_ROLE

    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def is_super_admin(self) -> bool:
        return self.role == "super_admin"


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    password: str
    role: str = OWNER_ROLE
    email: Optional[str] = None
    is_active: bool = True
