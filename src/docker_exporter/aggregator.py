"""Join of the per-stage collector outputs into one Snapshot."""

from __future__ import annotations

from collections.abc import Mapping

from docker_exporter.collectors.discovery import DiscoveryResult
from docker_exporter.core.schemas import (
    ContainerSnapshot,
    LogSample,
    ResourceSample,
    Snapshot,
    StartSample,
)


def aggregate(
    discovery: DiscoveryResult,
    stats: Mapping[str, ResourceSample],
    logs: Mapping[str, LogSample] | None,
    starts: Mapping[str, StartSample],
    hostname: str,
) -> Snapshot:
    """Build the cycle's Snapshot keyed by the discovery working set.

    Samples are matched by container ID only. A container missing from a
    stage keeps that sample as None; samples for IDs outside the working set
    are ignored.

    Args:
        discovery: Result of this cycle's discovery
        stats: Resource samples by container ID
        logs: Log samples by container ID, or None when log collection is off
        starts: Start samples by container ID
        hostname: Host label value

    Returns:
        Immutable Snapshot
    """
    logs = logs or {}
    containers = {
        container_id: ContainerSnapshot(
            info=discovery.containers[container_id],
            resources=stats.get(container_id),
            logs=logs.get(container_id),
            started=starts.get(container_id),
        )
        for container_id in discovery.ids
    }

    return Snapshot(
        hostname=hostname,
        running_count=discovery.running_count,
        stopped_count=discovery.stopped_count,
        containers=containers,
    )
