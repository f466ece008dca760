"""Runtime gateway abstract class.

The gateway is the only component that talks to the container runtime. The
collectors depend on this interface so tests can drive them with an in-memory
fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RuntimeGateway(ABC):
    """Abstract capability set of a container runtime.

    Implementations:
    - DockerGateway: Docker Engine API through the docker SDK
    """

    @abstractmethod
    def ping(self) -> None:
        """Check that the runtime is reachable.

        Raises:
            GatewayUnavailableError: If the runtime cannot be reached
        """

    @abstractmethod
    def list_containers(self, include_stopped: bool) -> list[dict[str, Any]]:
        """List containers as raw dicts with Id, Names, State and Status keys."""

    @abstractmethod
    def stats(self, container_id: str) -> dict[str, Any]:
        """Return a one-shot resource stats document for a container."""

    @abstractmethod
    def logs(self, container_id: str, stdout: bool, stderr: bool) -> bytes:
        """Return the full log buffer of the selected streams."""

    @abstractmethod
    def inspect(self, container_id: str) -> dict[str, Any]:
        """Return the inspect document of a container."""

    @abstractmethod
    def host_name(self) -> str:
        """Return the runtime host name used as the hostname label."""

    def close(self) -> None:
        """Release any client resources."""
