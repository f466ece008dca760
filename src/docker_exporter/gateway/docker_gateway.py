"""DockerGateway - RuntimeGateway implementation using the docker SDK.

Uses the low-level APIClient of docker.DockerClient so every call returns the
raw Engine API JSON, which the collectors decode themselves.
"""

from __future__ import annotations

import logging
from typing import Any

import docker
from docker.errors import DockerException

from docker_exporter.core.exceptions import GatewayUnavailableError
from docker_exporter.gateway.base import RuntimeGateway

logger = logging.getLogger(__name__)


class DockerGateway(RuntimeGateway):
    """Docker Engine gateway.

    Every request carries the client timeout, so a hung daemon call is
    cancelled at the transport level instead of holding a worker forever.

    Example:
        ```python
        gateway = DockerGateway.from_env(timeout=10)
        gateway.ping()
        for c in gateway.list_containers(include_stopped=True):
            print(c["Id"], c["State"])
        ```
    """

    def __init__(self, client: docker.DockerClient) -> None:
        """Initialize the gateway.

        Args:
            client: Connected docker client
        """
        self._client = client

    @classmethod
    def from_env(cls, timeout: float = 10) -> DockerGateway:
        """Create a gateway from DOCKER_HOST and related environment variables.

        Args:
            timeout: Per-request timeout in seconds

        Raises:
            GatewayUnavailableError: If the client cannot be created
        """
        try:
            client = docker.from_env(timeout=timeout)
        except (DockerException, OSError) as e:
            raise GatewayUnavailableError(f"Failed to create Docker client: {e}") from e
        return cls(client)

    def ping(self) -> None:
        try:
            self._client.ping()
        except (DockerException, OSError) as e:
            raise GatewayUnavailableError(f"Docker daemon is not reachable: {e}") from e

    def list_containers(self, include_stopped: bool) -> list[dict[str, Any]]:
        return self._client.api.containers(all=include_stopped)

    def stats(self, container_id: str) -> dict[str, Any]:
        return self._client.api.stats(container_id, stream=False, one_shot=True)

    def logs(self, container_id: str, stdout: bool, stderr: bool) -> bytes:
        return self._client.api.logs(
            container_id, stdout=stdout, stderr=stderr, stream=False, timestamps=False
        )

    def inspect(self, container_id: str) -> dict[str, Any]:
        return self._client.api.inspect_container(container_id)

    def host_name(self) -> str:
        try:
            info = self._client.info()
        except (DockerException, OSError) as e:
            raise GatewayUnavailableError(f"Failed to get Docker host info: {e}") from e
        return str(info.get("Name", ""))

    def close(self) -> None:
        try:
            self._client.close()
        except Exception as e:
            logger.debug(f"Error closing Docker client: {e}")
