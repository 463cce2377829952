"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
Configuration values come only from these sources.

Secrets (.env):
    DB_PASSWORD

Settings (YAML):
    application.yaml   - App identity, server, cors
    database.yaml      - Database connection settings
    logging.yaml       - Logging configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Only passwords, tokens, and keys."""

    db_password: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """
    Construct database URL from YAML config and secrets.

    An explicit `url` in database.yaml wins over host-based composition
    and does not require DB_PASSWORD.

    Args:
        async_driver: Use asyncpg driver if True, psycopg2 if False.

    Returns:
        Database connection URL string.
    """
    db = get_app_config().database
    if db.url:
        return db.url

    password = get_settings().db_password
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> str:
    """Get the backend server base URL from application.yaml."""
    server = get_app_config().application.server
    return f"http://{server.host}:{server.port}"
