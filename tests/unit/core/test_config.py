"""
Unit Tests for Configuration Management.

Tests run against the real project YAML files. Failure scenarios use
tmp_path to create controlled filesystems.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from modules.backend.core.config import (
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_database_url,
    get_server_base_url,
    get_settings,
    load_yaml_config,
    validate_project_root,
)
from modules.backend.core.config_schema import ApplicationSchema, DatabaseSchema, LoggingSchema


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


def _database(**overrides) -> DatabaseSchema:
    values = {
        "url": None,
        "host": "db.internal",
        "port": 5432,
        "name": "notevault",
        "user": "notevault",
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "echo": False,
    }
    values.update(overrides)
    return DatabaseSchema(**values)


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_outside_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_outside_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            validate_project_root()


class TestLoadYamlConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does_not_exist.yaml")

    def test_empty_file_returns_empty_dict(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        (settings_dir / "empty.yaml").write_text("")
        monkeypatch.chdir(tmp_path)

        assert load_yaml_config("empty.yaml") == {}


class TestAppConfig:
    """The shipped YAML files validate against their schemas."""

    def test_sections_are_typed(self):
        config = AppConfig()

        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.database, DatabaseSchema)
        assert isinstance(config.logging, LoggingSchema)

    def test_api_prefix(self):
        assert get_app_config().application.api_prefix == "/api/v1"

    def test_unknown_key_is_rejected(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        for name in ("application.yaml", "database.yaml", "logging.yaml"):
            (settings_dir / name).write_text(
                (find_project_root() / "config" / "settings" / name).read_text()
            )
        with open(settings_dir / "database.yaml", "a") as f:
            f.write("\nunexpected_key: 1\n")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="database.yaml"):
            AppConfig()


class TestGetDatabaseUrl:
    def test_explicit_url_wins(self):
        config = SimpleNamespace(database=_database(url="sqlite+aiosqlite:///./notevault.db"))
        with patch("modules.backend.core.config.get_app_config", return_value=config):
            assert get_database_url() == "sqlite+aiosqlite:///./notevault.db"

    def test_composed_from_yaml_and_secret(self):
        config = SimpleNamespace(database=_database())
        with (
            patch("modules.backend.core.config.get_app_config", return_value=config),
            patch("modules.backend.core.config.get_settings", return_value=Settings(db_password="pw")),
        ):
            assert get_database_url() == "postgresql+asyncpg://notevault:pw@db.internal:5432/notevault"
            assert get_database_url(async_driver=False).startswith("postgresql://")


class TestGetServerBaseUrl:
    def test_uses_application_server(self):
        server = get_app_config().application.server
        assert get_server_base_url() == f"http://{server.host}:{server.port}"
