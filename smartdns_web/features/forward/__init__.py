"""DNS forward groups and their domain rules."""

from smartdns_web.features.forward.schemas import ForwardRule
from smartdns_web.features.forward.service import ForwardService

__all__ = ["ForwardRule", "ForwardService"]
