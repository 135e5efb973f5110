"""
Application configuration loaded from a dotenv file and environment variables.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from student_service.core.exceptions import ConfigurationException

DEFAULT_CONFIG_PATH = "./.env"


class DatabaseSettings(BaseModel):
    """Relational database connection options."""

    driver: str = Field(
        default="postgresql+asyncpg",
        description="SQLAlchemy async driver name",
    )
    dsn: str = Field(..., description="Database connection string")
    pool_size: int = Field(default=5, ge=1)
    auto_migrate: bool = Field(
        default=True,
        description="Create missing tables on startup",
    )
    echo: bool = False


class JWTSettings(BaseModel):
    """Token signing options."""

    signing_key: str = ""
    algorithm: str = "HS256"
    access_token_ttl_minutes: int = Field(default=15, ge=1)
    refresh_token_ttl_minutes: int = Field(default=60 * 24 * 30, ge=1)


class ServerSettings(BaseModel):
    """HTTP server bind options."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=0, le=65535)
    root_path: str = ""
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )


class Settings(BaseSettings):
    """Application settings. Nested sections use `__`, e.g. DATABASE__DSN."""

    app_name: str = "student-service"
    environment: str = "development"
    log_level: str = "INFO"

    database: DatabaseSettings
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(
        env_file=DEFAULT_CONFIG_PATH,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


def load_settings(path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load settings from the dotenv file at `path`.

    Process environment variables take precedence over the file.

    Args:
        path: Path to the dotenv file

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationException: If the file is missing or the values are invalid
    """
    env_file = Path(path)
    if not env_file.is_file():
        raise ConfigurationException(
            f"config file not found: {env_file}",
            {"path": str(env_file)},
        )

    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        raise ConfigurationException(
            f"invalid configuration in {env_file}: {e}",
            {"path": str(env_file), "errors": e.errors(include_url=False)},
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationException(
            f"can't read config file {env_file}: {e}",
            {"path": str(env_file)},
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance loaded from the default path."""
    return load_settings()
