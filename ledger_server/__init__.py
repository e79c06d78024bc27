"""Wallet and sponsor-credit ledger service for the restaurant rewards console."""

__version__ = "0.3.0"
