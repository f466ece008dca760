"""Core module - configuration, schemas and errors."""

from __future__ import annotations

from docker_exporter.core.config import ExporterSettings, load_config
from docker_exporter.core.constants import (
    DEFAULT_LOG_CUSTOM_QUERY,
    DEFAULT_PORT,
    EXPOSITION_CONTENT_TYPE,
)
from docker_exporter.core.exceptions import (
    DiscoveryError,
    ExporterError,
    GatewayUnavailableError,
    StatsDecodeError,
    TaskTimeoutError,
)
from docker_exporter.core.schemas import (
    ContainerInfo,
    ContainerSnapshot,
    LogSample,
    LogStream,
    NetworkMode,
    ResourceSample,
    Snapshot,
    StartSample,
)

__all__ = [
    "DEFAULT_LOG_CUSTOM_QUERY",
    "DEFAULT_PORT",
    "EXPOSITION_CONTENT_TYPE",
    "ContainerInfo",
    "ContainerSnapshot",
    "DiscoveryError",
    "ExporterError",
    "ExporterSettings",
    "GatewayUnavailableError",
    "load_config",
    "LogSample",
    "LogStream",
    "NetworkMode",
    "ResourceSample",
    "Snapshot",
    "StartSample",
    "StatsDecodeError",
    "TaskTimeoutError",
]
