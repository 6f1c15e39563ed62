"""Configuration models using Pydantic."""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class BackendConfig(BaseModel):
    """Backend configuration shared with the template actions."""

    base_url: str = Field(
        default="http://localhost:7007",
        alias="baseUrl",
        description="Public base URL of the backend",
    )
    working_directory: Optional[str] = Field(
        default=None,
        alias="workingDirectory",
        description="Root directory for action workspaces (system temp dir if unset)",
    )

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class CatalogConfig(BaseModel):
    """Configuration for the catalog client."""

    base_url: str = Field(
        default="http://localhost:7007/api/catalog",
        alias="baseUrl",
        description="Base URL of the catalog REST API",
    )
    token: Optional[str] = Field(
        default=None,
        description="Bearer token sent with catalog requests",
    )
    timeout: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Catalog request timeout in seconds",
    )

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class ReaderConfig(BaseModel):
    """Configuration for the URL reader."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="URL read timeout in seconds",
    )
    max_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        alias="maxBytes",
        description="Maximum response size accepted by the reader",
    )

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class RunnerSettings(BaseSettings):
    """Global action runner configuration settings."""

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log format (json, plain)"
    )

    backend: BackendConfig = Field(default_factory=BackendConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)

    # Action execution configuration
    action_execution_timeout: int = Field(
        default=300,
        ge=10,
        le=1800,
        description="Action execution timeout in seconds"
    )

    # HTTP server configuration
    server_host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    server_port: int = Field(
        default=8080,
        ge=1024,
        le=65535,
        description="Port for the HTTP server"
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics"
    )

    class Config:
        """Pydantic configuration."""
        env_prefix = "ACTION_RUNNER_"
        env_nested_delimiter = "__"
        case_sensitive = False
        validate_assignment = True
