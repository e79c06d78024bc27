"""Database session dependency."""

from ledger_server.infrastructure.database.session import get_session as get_db_session

__all__ = ["get_db_session"]
