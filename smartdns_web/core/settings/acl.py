"""ACL materialization settings."""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_acl_yaml_source


class AclSettings(BaseSettings):
    """Limits for CIDR policy blocks.

    Environment variables use ACL_ prefix.
    Example: ACL_MAX_BLOCK_HOSTS=4096
    """

    max_block_hosts: int = Field(
        default=65536,
        ge=1,
        le=16_777_216,
        description=(
            "Largest number of usable host addresses a single block may expand to. "
            "Every host becomes one store key, so this bounds the fan-out of a submit or delete."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="ACL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_acl_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
