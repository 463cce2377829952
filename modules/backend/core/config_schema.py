"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    url: str | None = None
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema
