"""Gateway module - access to the container runtime."""

from __future__ import annotations

from docker_exporter.gateway.base import RuntimeGateway
from docker_exporter.gateway.docker_gateway import DockerGateway

__all__ = ["DockerGateway", "RuntimeGateway"]
