"""Configuration management for sproc-explain."""
from .settings import Settings
from .explain import (
    ExplainConfig,
    DatabaseConfig,
    SourcesConfig,
    SeedingConfig,
    LoggingConfig,
    load_explain_config,
)

__all__ = [
    "Settings",
    "ExplainConfig",
    "DatabaseConfig",
    "SourcesConfig",
    "SeedingConfig",
    "LoggingConfig",
    "load_explain_config",
]
