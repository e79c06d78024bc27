"""Feature modules: one package per ledger domain."""
