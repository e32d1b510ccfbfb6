"""Unified settings composition for convenient access.

Usage:
    from smartdns_web.core.settings import get_settings

    settings = get_settings()
    print(settings.app.port)
    print(settings.etcd.base_urls)

Each nested settings class still respects its own env prefix.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from .acl import AclSettings
from .app import AppSettings
from .etcd import EtcdSettings
from .logs import LoggingSettings


class Settings(BaseModel):
    """All settings domains composed into one object."""

    app: AppSettings = Field(default_factory=AppSettings)
    etcd: EtcdSettings = Field(default_factory=EtcdSettings)
    acl: AclSettings = Field(default_factory=AclSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(frozen=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached unified settings.

    Returns:
        Settings instance composing every domain.
    """
    from .loader import (
        get_acl_settings,
        get_app_settings,
        get_etcd_settings,
        get_logging_settings,
    )

    return Settings(
        app=get_app_settings(),
        etcd=get_etcd_settings(),
        acl=get_acl_settings(),
        logging=get_logging_settings(),
    )
