"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from smartdns_web.core.settings.loader import get_etcd_settings

    settings = get_etcd_settings()  # First call: loads and validates
    settings = get_etcd_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_etcd_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .acl import AclSettings
from .app import AppSettings
from .etcd import EtcdSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_etcd_settings() -> EtcdSettings:
    """Get cached etcd settings.

    Returns:
        Validated and frozen EtcdSettings instance.
    """
    return EtcdSettings()


@lru_cache(maxsize=1)
def get_acl_settings() -> AclSettings:
    """Get cached ACL settings.

    Returns:
        Validated and frozen AclSettings instance.
    """
    return AclSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_settings_caches() -> None:
    """Clear every cached loader (useful in tests)."""
    get_app_settings.cache_clear()
    get_etcd_settings.cache_clear()
    get_acl_settings.cache_clear()
    get_logging_settings.cache_clear()

    from .unified import get_settings

    get_settings.cache_clear()
