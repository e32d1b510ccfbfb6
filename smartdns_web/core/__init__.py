"""Core building blocks: settings, exceptions, schemas and dependencies."""
