"""Shared constants for the Docker exporter.

Centralized constants to avoid duplication and ensure consistency across modules.
"""

from __future__ import annotations

# Content type of the Prometheus text exposition format served on /metrics
EXPOSITION_CONTENT_TYPE = "text/plain; version=0.0.4"

# Default pattern for custom log line counting: quoted error levels, e.g. "level":"error"
DEFAULT_LOG_CUSTOM_QUERY = r"\"(err|error|ERR|ERROR)\""

# Listening port of the exporter
DEFAULT_PORT = 9333

# Container state reported by the runtime for running containers (case-sensitive)
RUNNING_STATE = "running"

# Docker reports CPU counters in nanoseconds
NANOSECONDS_PER_SECOND = 1e9
