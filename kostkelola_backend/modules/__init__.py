"""Feature modules: one package per domain area."""
