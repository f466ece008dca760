"""Exporter settings and configuration file loading.

Settings are read from environment variables. A YAML or JSON file may
additionally be passed on the command line; its values take precedence over
the environment.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docker_exporter.core.constants import DEFAULT_LOG_CUSTOM_QUERY, DEFAULT_PORT
from docker_exporter.core.schemas import NetworkMode


class ExporterSettings(BaseSettings):
    """Runtime configuration of the exporter.

    The three log options keep the environment variable names of the
    original deployment (DOCKER_LOG_*); everything else uses the EXPORTER_
    prefix.
    """

    log_metrics: bool = Field(
        default=False,
        validation_alias="DOCKER_LOG_METRICS",
        description="Export line counts of container stdout/stderr",
    )
    log_custom_metrics: bool = Field(
        default=False,
        validation_alias="DOCKER_LOG_CUSTOM_METRICS",
        description="Count log lines matching log_custom_query",
    )
    log_custom_query: str = Field(
        default=DEFAULT_LOG_CUSTOM_QUERY,
        validation_alias="DOCKER_LOG_CUSTOM_QUERY",
        description="Regular expression for custom log line counting",
    )
    include_stopped: bool = Field(
        default=True, description="List stopped containers to report the down count"
    )
    network_mode: NetworkMode = Field(
        default=NetworkMode.FIRST, description="Network interface reduction policy"
    )
    max_workers: int = Field(
        default=16, ge=1, le=256, description="Concurrent runtime queries per stage"
    )
    task_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Deadline for one per-container query"
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Docker API request timeout; defaults to task_timeout_seconds",
    )
    host: str = Field(default="0.0.0.0", description="HTTP listen address")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="HTTP listen port")
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="EXPORTER_",
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("log_custom_query", mode="before")
    @classmethod
    def default_blank_query(cls, v: Any) -> Any:
        """Fall back to the default pattern when the variable is set but empty."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LOG_CUSTOM_QUERY
        return v

    @field_validator("log_custom_query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid custom log query {v!r}: {e}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def check_request_timeout(self) -> ExporterSettings:
        """request_timeout_seconds defaults to, and may not exceed, task_timeout_seconds."""
        if self.request_timeout_seconds is None:
            self.request_timeout_seconds = self.task_timeout_seconds
        elif self.request_timeout_seconds > self.task_timeout_seconds:
            raise ValueError(
                f"request_timeout_seconds ({self.request_timeout_seconds:g}) must not exceed "
                f"task_timeout_seconds ({self.task_timeout_seconds:g})"
            )
        return self

    @property
    def log_pattern(self) -> re.Pattern[str] | None:
        """Compiled custom pattern, or None when custom counting is disabled."""
        if not self.log_custom_metrics:
            return None
        return re.compile(self.log_custom_query)


def load_config(path: Path | str | None = None, **overrides: Any) -> ExporterSettings:
    """Load exporter settings from the environment and an optional file.

    Args:
        path: Optional path to a YAML or JSON configuration file
        **overrides: Explicit values (e.g. from CLI options); None values are ignored

    Returns:
        Validated ExporterSettings object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
        pydantic.ValidationError: If config is invalid
    """
    data: dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()
        with open(path, encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported config format: {suffix}. Use .yaml, .yml, or .json")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {path}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return ExporterSettings(**data)
