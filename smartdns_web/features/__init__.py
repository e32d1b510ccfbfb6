"""Feature modules, one package per API area."""
