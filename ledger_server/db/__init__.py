"""ORM models for the ledger tables."""
