"""Tests for application configuration."""
import os
import pytest
from unittest.mock import patch


class TestProductionConfig:
    """Tests for ProductionConfig security validations."""

    def test_production_config_requires_secret_key(self):
        """ProductionConfig raises error if ADMIN_SECRET_KEY not set."""
        with patch.dict(os.environ, {"STORE_BACKEND": "sql"}, clear=False):
            os.environ.pop("ADMIN_SECRET_KEY", None)

            from gateway_admin.config import ProductionConfig

            with pytest.raises(ValueError, match="ADMIN_SECRET_KEY must be set"):
                ProductionConfig()

    def test_production_config_rejects_default_secret(self):
        """ProductionConfig rejects default dev secret value."""
        with patch.dict(
            os.environ,
            {
                "ADMIN_SECRET_KEY": "dev-secret-key-change-in-production",
                "STORE_BACKEND": "sql",
            },
            clear=False,
        ):
            from gateway_admin.config import ProductionConfig

            with pytest.raises(ValueError, match="insecure default"):
                ProductionConfig()

    def test_production_config_requires_sql_store(self):
        """ProductionConfig refuses the in-process store."""
        with patch.dict(
            os.environ,
            {"ADMIN_SECRET_KEY": "a-secure-production-secret", "STORE_BACKEND": "memory"},
            clear=False,
        ):
            from gateway_admin.config import ProductionConfig

            with pytest.raises(ValueError, match="STORE_BACKEND must be 'sql'"):
                ProductionConfig()

    def test_production_config_accepts_valid_settings(self):
        """ProductionConfig accepts a proper secret and the SQL store."""
        with patch.dict(
            os.environ,
            {"ADMIN_SECRET_KEY": "a-secure-production-secret", "STORE_BACKEND": "sql"},
            clear=False,
        ):
            from gateway_admin.config import ProductionConfig

            config = ProductionConfig()
            assert config.SECRET_KEY == "a-secure-production-secret"


class TestGetConfig:
    """Tests for get_config and container_settings."""

    def test_get_config_by_name(self):
        from gateway_admin.config import get_config, TestingConfig

        assert get_config("testing") is TestingConfig

    def test_get_config_unknown_falls_back_to_development(self):
        from gateway_admin.config import get_config, DevelopmentConfig

        assert get_config("staging") is DevelopmentConfig

    def test_testing_config_uses_memory_store(self):
        from gateway_admin.config import TestingConfig

        assert TestingConfig.STORE_BACKEND == "memory"
        assert TestingConfig.SQLALCHEMY_ENGINE_OPTIONS == {}

    def test_container_settings_defaults(self):
        from gateway_admin.config import container_settings

        settings = container_settings({})

        assert settings["store_backend"] == "sql"
        assert settings["store_key_prefix"] == ""
        assert settings["route_snapshot_refresh_seconds"] == 5.0
        assert settings["admin_api_version"] == "v3"
        assert settings["plugin_schema_dirs"]
