"""Container discovery.

Lists the containers of the host once per cycle and splits them into the
running working set and the stopped count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from docker_exporter.core.constants import RUNNING_STATE
from docker_exporter.core.exceptions import DiscoveryError
from docker_exporter.core.schemas import ContainerInfo
from docker_exporter.gateway.base import RuntimeGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryResult:
    """Containers found in one cycle.

    ``ids`` holds the running containers in the order the runtime listed them;
    ``containers`` maps each of them to its info.
    """

    containers: dict[str, ContainerInfo] = field(default_factory=dict)
    ids: tuple[str, ...] = ()
    running_count: int = 0
    stopped_count: int = 0


def container_name(names: list[str] | None) -> str:
    """Display name from the runtime's name list, without the leading '/'."""
    if not names:
        return ""
    name = names[0]
    return name[1:] if name.startswith("/") else name


def discover(gateway: RuntimeGateway, include_stopped: bool = True) -> DiscoveryResult:
    """List containers and build the working set for this cycle.

    Args:
        gateway: Runtime gateway
        include_stopped: Also list non-running containers so they are counted

    Returns:
        DiscoveryResult with the running containers and both counts

    Raises:
        DiscoveryError: If the container list cannot be fetched
    """
    try:
        listed: list[dict[str, Any]] = gateway.list_containers(include_stopped)
    except Exception as e:
        raise DiscoveryError(f"Failed to get container list: {e}") from e

    containers: dict[str, ContainerInfo] = {}
    ids: list[str] = []
    running = 0
    stopped = 0

    for entry in listed:
        container_id = entry.get("Id")
        if not container_id:
            logger.warning(f"Skipping container list entry without an ID: {entry!r}")
            continue

        state = entry.get("State", "")
        if state != RUNNING_STATE:
            stopped += 1
            continue

        running += 1
        containers[container_id] = ContainerInfo(
            id=container_id,
            name=container_name(entry.get("Names")),
            state=state,
            status=entry.get("Status", ""),
        )
        ids.append(container_id)

    logger.debug(f"Discovered {running} running and {stopped} stopped containers")
    return DiscoveryResult(
        containers=containers,
        ids=tuple(ids),
        running_count=running,
        stopped_count=stopped,
    )
