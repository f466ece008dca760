"""Docker Exporter - Prometheus metrics for running Docker containers."""

from __future__ import annotations

__version__ = "0.1.0"

from docker_exporter.core.config import ExporterSettings, load_config  # noqa: E402
from docker_exporter.core.schemas import (  # noqa: E402
    ContainerInfo,
    ContainerSnapshot,
    LogSample,
    ResourceSample,
    Snapshot,
    StartSample,
)

__all__ = [
    "ContainerInfo",
    "ContainerSnapshot",
    "ExporterSettings",
    "LogSample",
    "ResourceSample",
    "Snapshot",
    "StartSample",
    "load_config",
    "__version__",
]
