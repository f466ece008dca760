"""Utils module - Shared utilities."""

from __future__ import annotations

from docker_exporter.utils.logging import setup_logging

__all__ = ["setup_logging"]
