"""Configuration management with Pydantic models."""

from .reader import ConfigReader
from .settings import BackendConfig, CatalogConfig, ReaderConfig, RunnerSettings

__all__ = ["RunnerSettings", "BackendConfig", "CatalogConfig", "ReaderConfig", "ConfigReader"]
