"""etcd key-value store connection settings.

Environment variables use ETCD_ prefix.
Example: ETCD_ENABLED=true, ETCD_ENDPOINTS=10.0.0.1:2379,10.0.0.2:2379

The YAML source also accepts the legacy ``config.yaml`` keys
(``EtcdAddr``, ``EtcdUser``, ``EtcdPassword``) so an existing deployment
file can be dropped into ``conf/etcd.yaml`` unchanged.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import Field, SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .yaml_sources import create_etcd_yaml_source

# Lower-cased legacy config.yaml keys
LEGACY_KEYS = {
    "etcdaddr": "endpoints",
    "etcduser": "username",
    "etcdpassword": "password",
}


class EtcdSettings(BaseSettings):
    """etcd v3 store settings.

    When ``enabled`` is False the application runs against an in-memory
    store, which is what the test-suite and local development use.
    """

    # ──────────────────────────────────────────────────────────────
    # Enable/Disable toggle
    # ──────────────────────────────────────────────────────────────

    enabled: bool = Field(
        default=True,
        description="Use etcd as the backing store (False selects the in-memory store)",
    )

    # ──────────────────────────────────────────────────────────────
    # Cluster connection
    # ──────────────────────────────────────────────────────────────

    endpoints: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["127.0.0.1:2379"],
        description="etcd endpoints (host:port or full URL), tried in order",
    )

    scheme: str = Field(
        default="http",
        pattern=r"^https?$",
        description="Scheme used for endpoints given without one",
    )

    username: str | None = Field(
        default=None,
        description="etcd user for token authentication",
    )

    password: SecretStr | None = Field(
        default=None,
        description="etcd password for token authentication",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates when using HTTPS",
    )

    # ──────────────────────────────────────────────────────────────
    # Timeouts
    # ──────────────────────────────────────────────────────────────

    dial_timeout: float = Field(
        default=10.0,
        ge=0.5,
        le=60.0,
        description="Connection establishment timeout in seconds",
    )

    read_timeout: float = Field(
        default=10.0,
        ge=0.1,
        le=120.0,
        description="Timeout for single reads and prefix listings in seconds",
    )

    write_timeout: float = Field(
        default=20.0,
        ge=0.1,
        le=300.0,
        description="Timeout for writes and deletes, including fan-out writes, in seconds",
    )

    # ──────────────────────────────────────────────────────────────
    # Validators
    # ──────────────────────────────────────────────────────────────

    @model_validator(mode="before")
    @classmethod
    def _map_legacy_keys(cls, data: Any) -> Any:
        """Translate legacy config.yaml keys to field names."""
        if not isinstance(data, dict):
            return data
        mapped: dict[str, Any] = {}
        for key, value in data.items():
            name = LEGACY_KEYS.get(key.lower()) if isinstance(key, str) else None
            if name is None:
                mapped[key] = value
            else:
                mapped.setdefault(name, value)
        return mapped

    @field_validator("endpoints", mode="before")
    @classmethod
    def _parse_endpoints(cls, value: Any) -> list[str]:
        """Parse endpoints from JSON string or comma-separated list."""
        if isinstance(value, str):
            if value.startswith("["):
                return json.loads(value)
            return [e.strip() for e in value.split(",") if e.strip()]
        return value if value else []

    @model_validator(mode="after")
    def _validate_endpoints(self) -> EtcdSettings:
        """Require at least one endpoint when etcd is enabled."""
        if self.enabled and not self.endpoints:
            raise ValueError("at least one etcd endpoint is required when etcd is enabled")
        return self

    # ──────────────────────────────────────────────────────────────
    # Computed properties
    # ──────────────────────────────────────────────────────────────

    @computed_field
    @property
    def is_configured(self) -> bool:
        """Check if etcd is enabled and has endpoints."""
        return self.enabled and bool(self.endpoints)

    @computed_field
    @property
    def base_urls(self) -> list[str]:
        """Endpoints normalized to full base URLs."""
        urls = []
        for endpoint in self.endpoints:
            url = endpoint if "://" in endpoint else f"{self.scheme}://{endpoint}"
            urls.append(url.rstrip("/"))
        return urls

    @property
    def auth_enabled(self) -> bool:
        """Whether token authentication should be performed."""
        return bool(self.username)

    # ──────────────────────────────────────────────────────────────
    # Model configuration
    # ──────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_prefix="ETCD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_etcd_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
