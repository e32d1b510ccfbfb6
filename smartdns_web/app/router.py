"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartdns_web.core.settings import get_app_settings
from smartdns_web.features.acl.router import router as acl_router
from smartdns_web.features.forward.router import router as forward_router
from smartdns_web.features.metrics.router import router as metrics_router
from smartdns_web.features.status.router import router as status_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from smartdns_web.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Feature routers are mounted under the API prefix; ``/metrics`` stays at
    the root where scrapers expect it.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    settings = app_settings or get_app_settings()
    api_prefix = settings.api_prefix

    app.include_router(metrics_router)
    app.include_router(status_router, prefix=api_prefix)
    app.include_router(acl_router, prefix=api_prefix)
    app.include_router(forward_router, prefix=api_prefix)

    logger.debug("Routers configured", extra={"api_prefix": api_prefix})
