"""CLI command modules."""

from smartdns_web.cli.commands import acl, server

__all__ = ["acl", "server"]
