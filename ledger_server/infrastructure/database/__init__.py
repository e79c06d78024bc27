"""Database infrastructure helpers (engine, sessions, migrations)."""

from .base import Base
from .session import enable_sqlite_savepoints, get_engine, get_session, init_db

__all__ = ["Base", "enable_sqlite_savepoints", "get_engine", "get_session", "init_db"]
