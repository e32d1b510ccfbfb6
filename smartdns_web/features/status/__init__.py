"""Status listings of smartdns instances and line resolvers."""

from smartdns_web.features.status.service import StatusService

__all__ = ["StatusService"]
