"""Modular Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from smartdns_web.core.settings import get_etcd_settings

Or use unified settings for convenient access to all domains:
    from smartdns_web.core.settings import get_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional)
    3. Environment variables
    4. .env file
    5. secrets_dir
"""

from __future__ import annotations

from .loader import (
    clear_all_settings_caches,
    get_acl_settings,
    get_app_settings,
    get_etcd_settings,
    get_logging_settings,
)
from .unified import Settings, get_settings

__all__ = [
    "Settings",
    "clear_all_settings_caches",
    "get_acl_settings",
    "get_app_settings",
    "get_etcd_settings",
    "get_logging_settings",
    "get_settings",
]
