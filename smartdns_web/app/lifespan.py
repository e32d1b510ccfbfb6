"""Application lifespan management.

Startup Order:
1. Core (logging, application info metric)
2. Key-value store (etcd, or in memory when disabled)

Shutdown Order: Reverse of startup, logging last
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from smartdns_web.core.settings import get_app_settings, get_etcd_settings, get_logging_settings
from smartdns_web.infra.kv import start_kv_store, stop_kv_store
from smartdns_web.infra.logging.config import setup_logging, shutdown as shutdown_logging
from smartdns_web.infra.metrics.prometheus import application_info

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    """Configure logging and publish the application info metric."""
    app = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )

    application_info.labels(
        version=app.version,
        service=app.service_name,
        environment=app.environment,
    ).set(1)


async def _startup_kv_store() -> None:
    settings = get_etcd_settings()
    await start_kv_store()
    if settings.is_configured:
        logger.info("etcd store configured", extra={"endpoints": settings.base_urls})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app

    await _startup_core()
    await _startup_kv_store()

    yield

    logger.info("Application shutting down")
    await stop_kv_store()
    logger.info("Application shutdown complete")
    shutdown_logging()
