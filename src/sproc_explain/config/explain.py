"""Run configuration loading and validation.

Loads YAML configuration for an EXPLAIN run, falling back to environment
settings when no file is given.
"""
from __future__ import annotations
import os
import re
from pathlib import Path
from typing import Literal, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from ..errors import ProductionEnvironmentError
from .settings import Settings

PRODUCTION = re.compile(r"^prod", re.IGNORECASE)


class DatabaseConfig(BaseModel):
    """Database configuration."""
    dsn: str = Field("mysql://root@localhost:3306/fxa", description="MySQL connection URL")

    @field_validator("dsn")
    @classmethod
    def validate_dsn(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("mysql://"):
            raise ValueError("dsn must start with 'mysql://'")
        return v


class SourcesConfig(BaseModel):
    """Where procedures are declared and called."""
    root: str = Field(".", description="Directory holding procedure source files")
    caller_file: str | None = Field(None, description="File whose CALL statements name the procedures to check")
    ignore_file: str = Field(".explain-ignore", description="Procedures to skip, one per line")
    patterns: list[str] = Field(
        default_factory=lambda: ["*.sql"],
        description="Filename globs of procedure source files"
    )


class SeedingConfig(BaseModel):
    """Fixture seeding configuration."""
    record_count: int = Field(100, ge=1, le=10000, description="Accounts to create")
    known_args: dict[str, Union[str, int, float]] = Field(
        default_factory=dict,
        description="Extra fixed argument values, by lowercase name"
    )

    @field_validator("known_args")
    @classmethod
    def lowercase_names(cls, v: dict[str, Union[str, int, float]]) -> dict[str, Union[str, int, float]]:
        return {name.lower(): value for name, value in v.items()}


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("WARNING", description="Log level")
    format: str = Field(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log record format"
    )

    @field_validator("level", mode="before")
    @classmethod
    def uppercase_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ExplainConfig(BaseModel):
    """Complete run configuration."""
    environment: str = Field("", description="Deployment environment name")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    seeding: SeedingConfig = Field(default_factory=SeedingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ExplainConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated ExplainConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        if not data:
            raise ValueError(f"Empty configuration file: {config_path}")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ExplainConfig:
        """Build configuration from environment settings."""
        settings = settings or Settings()
        return cls(
            environment=settings.environment,
            database=DatabaseConfig(dsn=settings.database_url),
            sources=SourcesConfig(
                root=settings.source_root,
                caller_file=settings.caller_file or None,
                ignore_file=settings.ignore_file,
                patterns=settings.source_patterns or ["*.sql"],
            ),
            seeding=SeedingConfig(record_count=settings.record_count),
            logging=LoggingConfig(level=settings.log_level),
        )

    def check_environment(self) -> None:
        """Refuse to run against a production deployment.

        Both the configured environment and NODE_ENV are checked, whichever
        source the configuration was loaded from.

        Raises:
            ProductionEnvironmentError: If either name starts with "prod"
        """
        names = (self.environment or "", os.getenv("NODE_ENV", ""))
        if any(PRODUCTION.match(name) for name in names):
            raise ProductionEnvironmentError("Production environment detected, aborting.")

    def log_redacted(self) -> dict:
        """Get configuration dict with the DSN password redacted for logging."""
        config_dict = self.model_dump()

        dsn = config_dict["database"]["dsn"]
        if "@" in dsn:
            credentials, host = dsn.rsplit("@", 1)
            scheme, _, user_pass = credentials.partition("://")
            if ":" in user_pass:
                user = user_pass.split(":", 1)[0]
                config_dict["database"]["dsn"] = f"{scheme}://{user}:***@{host}"

        return config_dict


def load_explain_config(config_path: str | Path | None = None) -> ExplainConfig:
    """Load run configuration from file or environment.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Validated ExplainConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path:
        return ExplainConfig.from_yaml(config_path)

    return ExplainConfig.from_settings()
