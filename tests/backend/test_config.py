"""
Tests for configuration loading.

These tests verify:
- Nested sections are read from the dotenv file
- Environment variables override the file
- Missing or invalid configuration raises ConfigurationException
"""

import pytest

from student_service.config import get_settings, load_settings
from student_service.core.exceptions import ConfigurationException


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_reads_nested_sections_from_file(self, write_env_file):
        path = write_env_file(
            DATABASE__DRIVER="postgresql+asyncpg",
            DATABASE__DSN="postgresql://u:p@db:5432/students",
            JWT__SIGNING_KEY="secret",
            SERVER__PORT="9090",
        )

        settings = load_settings(path)

        assert settings.database.driver == "postgresql+asyncpg"
        assert settings.database.dsn == "postgresql://u:p@db:5432/students"
        assert settings.jwt.signing_key == "secret"
        assert settings.server.port == 9090

    def test_defaults_applied_for_optional_values(self, write_env_file):
        path = write_env_file(DATABASE__DSN="sqlite:///students.db")

        settings = load_settings(path)

        assert settings.database.driver == "postgresql+asyncpg"
        assert settings.database.auto_migrate is True
        assert settings.jwt.algorithm == "HS256"
        assert settings.jwt.access_token_ttl_minutes == 15
        assert settings.server.host == "0.0.0.0"
        assert settings.environment == "development"

    def test_signing_key_defaults_to_empty(self, write_env_file):
        """An absent key is left for the token manager to reject."""
        path = write_env_file(DATABASE__DSN="sqlite:///students.db")

        assert load_settings(path).jwt.signing_key == ""

    def test_environment_variable_overrides_file(self, write_env_file, monkeypatch):
        path = write_env_file(DATABASE__DSN="sqlite:///students.db", SERVER__PORT="8000")
        monkeypatch.setenv("SERVER__PORT", "9000")

        assert load_settings(path).server.port == 9000

    def test_log_level_normalized(self, write_env_file):
        path = write_env_file(DATABASE__DSN="sqlite:///students.db", LOG_LEVEL="debug")

        assert load_settings(path).log_level == "DEBUG"


class TestGetSettings:
    """Tests for the cached get_settings() accessor."""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_reads_default_path_once(self, write_env_file, tmp_path, monkeypatch):
        write_env_file(DATABASE__DSN="sqlite:///students.db", APP_NAME="from-default-path")
        monkeypatch.chdir(tmp_path)

        settings = get_settings()

        assert settings.app_name == "from-default-path"
        assert get_settings() is settings

    def test_missing_default_file_raises(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationException, match="not found"):
            get_settings()


class TestLoadSettingsErrors:
    """Tests for configuration errors."""

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationException, match="not found"):
            load_settings(tmp_path / "missing.env")

    def test_missing_dsn_raises(self, write_env_file):
        path = write_env_file(JWT__SIGNING_KEY="secret")

        with pytest.raises(ConfigurationException) as exc_info:
            load_settings(path)

        assert "database" in exc_info.value.message

    def test_invalid_environment_raises(self, write_env_file):
        path = write_env_file(DATABASE__DSN="sqlite:///students.db", ENVIRONMENT="qa")

        with pytest.raises(ConfigurationException):
            load_settings(path)

    def test_invalid_port_raises(self, write_env_file):
        path = write_env_file(DATABASE__DSN="sqlite:///students.db", SERVER__PORT="70000")

        with pytest.raises(ConfigurationException):
            load_settings(path)
