"""Unit tests for the settings domains."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from smartdns_web.core.settings import (
    get_acl_settings,
    get_etcd_settings,
    get_settings,
)
from smartdns_web.core.settings.app import AppSettings
from smartdns_web.core.settings.etcd import EtcdSettings
from smartdns_web.core.settings.logs import LoggingSettings


@pytest.mark.unit
class TestEtcdSettings:
    """Tests for EtcdSettings."""

    def test_defaults(self):
        settings = EtcdSettings(enabled=True)

        assert settings.endpoints == ["127.0.0.1:2379"]
        assert settings.read_timeout == 10.0
        assert settings.write_timeout == 20.0
        assert settings.auth_enabled is False

    def test_comma_separated_endpoints_from_env(self, monkeypatch):
        """ETCD_ENDPOINTS accepts a plain comma-separated list."""
        monkeypatch.setenv("ETCD_ENABLED", "true")
        monkeypatch.setenv("ETCD_ENDPOINTS", "10.0.0.1:2379, 10.0.0.2:2379")

        settings = get_etcd_settings()

        assert settings.endpoints == ["10.0.0.1:2379", "10.0.0.2:2379"]
        assert settings.base_urls == ["http://10.0.0.1:2379", "http://10.0.0.2:2379"]

    def test_json_endpoints(self):
        settings = EtcdSettings(enabled=True, endpoints='["https://etcd:2379/"]')

        assert settings.base_urls == ["https://etcd:2379"]

    def test_legacy_config_keys(self):
        """EtcdAddr/EtcdUser/EtcdPassword map onto the new fields."""
        settings = EtcdSettings.model_validate(
            {
                "enabled": True,
                "EtcdAddr": "10.0.0.1:2379,10.0.0.2:2379",
                "EtcdUser": "root",
                "EtcdPassword": "secret",
            }
        )

        assert settings.endpoints == ["10.0.0.1:2379", "10.0.0.2:2379"]
        assert settings.username == "root"
        assert settings.password.get_secret_value() == "secret"
        assert settings.auth_enabled is True

    def test_legacy_yaml_file(self, tmp_path, monkeypatch):
        """A config.yaml from an existing deployment loads from conf/etcd.yaml."""
        (tmp_path / "etcd.yaml").write_text("EtcdAddr: 10.9.0.1:2379\nEtcdUser: admin\n")
        monkeypatch.setenv("ETCD_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("ETCD_ENABLED", "true")

        settings = get_etcd_settings()

        assert settings.endpoints == ["10.9.0.1:2379"]
        assert settings.username == "admin"

    def test_enabled_requires_endpoints(self):
        with pytest.raises(ValidationError):
            EtcdSettings(enabled=True, endpoints="")

    def test_disabled_is_not_configured(self):
        assert EtcdSettings(enabled=False).is_configured is False

    def test_settings_are_frozen(self):
        settings = EtcdSettings(enabled=False)

        with pytest.raises(ValidationError):
            settings.read_timeout = 3.0


@pytest.mark.unit
class TestOtherSettings:
    """Tests for app, ACL and logging settings."""

    def test_acl_limit_from_env(self, monkeypatch):
        monkeypatch.setenv("ACL_MAX_BLOCK_HOSTS", "4096")

        assert get_acl_settings().max_block_hosts == 4096

    def test_acl_limit_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("ACL_MAX_BLOCK_HOSTS", "0")

        with pytest.raises(ValidationError):
            get_acl_settings()

    def test_cors_origins_comma_separated(self, monkeypatch):
        monkeypatch.setenv("APP_CORS_ORIGINS", "http://a.example,http://b.example")

        assert AppSettings().cors_origins == ["http://a.example", "http://b.example"]

    def test_production_rejects_debug(self):
        with pytest.raises(ValidationError):
            AppSettings(environment="production", debug=True)

    def test_log_level_is_normalized(self):
        settings = LoggingSettings(level="debug")

        assert settings.level == "DEBUG"
        assert settings.to_logging_kwargs()["log_level"] == "DEBUG"

    def test_file_path_ignored_unless_enabled(self):
        assert LoggingSettings(file_enabled=False).to_logging_kwargs()["file_path"] is None

    def test_unified_settings(self):
        settings = get_settings()

        assert settings.app.api_prefix == "/v1"
        assert settings.etcd.enabled is False
