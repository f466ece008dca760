"""Prometheus text exposition (format version 0.0.4) of a Snapshot.

Every metric family is written as a HELP line, a TYPE line and one sample.
Families whose sample or stats facet is absent for a container are left out
for that container; they are never written as zero.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from docker_exporter.core.schemas import ContainerSnapshot, ResourceSample, Snapshot

COUNTER = "counter"
GAUGE = "gauge"


@dataclass(frozen=True)
class ResourceFamily:
    """A per-container metric family backed by one ResourceSample field."""

    name: str
    help: str
    type: str
    facet: str
    value: Callable[[ResourceSample], float | int]


RESOURCE_FAMILIES: tuple[ResourceFamily, ...] = (
    # CPU
    ResourceFamily(
        "docker_cpu_usage_total",
        "Total CPU usage (user and kernel) in seconds",
        COUNTER,
        "cpu",
        lambda s: s.cpu_total_seconds,
    ),
    ResourceFamily(
        "docker_cpu_usage_user",
        "User CPU usage in seconds",
        COUNTER,
        "cpu",
        lambda s: s.cpu_user_seconds,
    ),
    ResourceFamily(
        "docker_cpu_usage_kernel",
        "Kernel CPU usage in seconds",
        COUNTER,
        "cpu",
        lambda s: s.cpu_kernel_seconds,
    ),
    # Memory
    ResourceFamily(
        "docker_memory_total",
        "Total memory size in bytes",
        GAUGE,
        "memory",
        lambda s: s.mem_limit_bytes,
    ),
    ResourceFamily(
        "docker_memory_usage",
        "Usage memory size in bytes",
        GAUGE,
        "memory",
        lambda s: s.mem_usage_bytes,
    ),
    # Network
    ResourceFamily(
        "docker_network_received_bytes",
        "Number of bytes received on the network",
        COUNTER,
        "network",
        lambda s: s.net_rx_bytes,
    ),
    ResourceFamily(
        "docker_network_received_packages",
        "Number of packages received on the network",
        COUNTER,
        "network",
        lambda s: s.net_rx_packets,
    ),
    ResourceFamily(
        "docker_network_transmit_bytes",
        "Number of bytes transmitted on the network",
        COUNTER,
        "network",
        lambda s: s.net_tx_bytes,
    ),
    ResourceFamily(
        "docker_network_transmit_packages",
        "Number of packages transmitted on the network",
        COUNTER,
        "network",
        lambda s: s.net_tx_packets,
    ),
    # Block I/O
    ResourceFamily(
        "docker_io_read_bytes",
        "Number of bytes read by the block device",
        COUNTER,
        "io",
        lambda s: s.io_read_bytes,
    ),
    ResourceFamily(
        "docker_io_write_bytes",
        "Number of bytes write by the block device",
        COUNTER,
        "io",
        lambda s: s.io_write_bytes,
    ),
    # PIDs
    ResourceFamily(
        "docker_process_pids_count",
        "Number of running processes and threads",
        GAUGE,
        "pids",
        lambda s: s.pid_count,
    ),
)

CUSTOM_LOG_HELP = (
    "Number of logs containing custom regular expression from all streams "
    "(by default, containing the error level)"
)


def format_value(value: float | int) -> str:
    """Render a sample value: integral numbers without a decimal point."""
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_labels(labels: dict[str, str]) -> str:
    return ",".join(f'{key}="{escape_label_value(value)}"' for key, value in labels.items())


def family_lines(
    name: str, help_text: str, metric_type: str, labels: dict[str, str], value: float | int
) -> list[str]:
    """HELP, TYPE and sample line of one metric family."""
    return [
        f"# HELP {name} {help_text}",
        f"# TYPE {name} {metric_type}",
        f"{name}{{{format_labels(labels)}}} {format_value(value)}",
    ]


def container_lines(
    container: ContainerSnapshot,
    hostname: str,
    include_logs: bool = False,
    include_log_matches: bool = False,
) -> list[str]:
    """All metric families of one container, followed by a blank line."""
    labels = {
        "containerId": container.info.id,
        "containerName": container.info.name,
        "hostname": hostname,
    }
    lines: list[str] = []

    resources = container.resources
    if resources is not None:
        for family in RESOURCE_FAMILIES:
            if resources.has_facet(family.facet):
                lines += family_lines(
                    family.name, family.help, family.type, labels, family.value(resources)
                )

    logs = container.logs
    if include_logs and logs is not None:
        lines += family_lines(
            "docker_logs_stdout_count",
            "Number of logs from stdout stream",
            COUNTER,
            labels,
            logs.stdout_lines,
        )
        lines += family_lines(
            "docker_logs_stderr_count",
            "Number of logs from stderr stream",
            COUNTER,
            labels,
            logs.stderr_lines,
        )
        lines += family_lines(
            "docker_logs_all_count",
            "Number of logs from all stream",
            COUNTER,
            labels,
            logs.total_lines,
        )
        if include_log_matches:
            lines += family_lines(
                "docker_logs_custom_count", CUSTOM_LOG_HELP, COUNTER, labels, logs.total_matches
            )

    if container.started is not None:
        lines += family_lines(
            "docker_started_time",
            "Container started time",
            GAUGE,
            labels,
            container.started.started_at_unix_seconds,
        )

    lines.append("")
    return lines


def encode_snapshot(
    snapshot: Snapshot,
    include_logs: bool = False,
    include_log_matches: bool = False,
) -> list[str]:
    """Render a Snapshot as exposition lines.

    Args:
        snapshot: Result of one collection cycle
        include_logs: Emit the log line count families
        include_log_matches: Also emit the custom match family (needs include_logs)

    Returns:
        Lines without trailing newlines, host families first
    """
    host_labels = {"hostname": snapshot.hostname}
    lines = family_lines(
        "docker_containers_up_count",
        "Number of running containers",
        GAUGE,
        host_labels,
        snapshot.running_count,
    )
    lines += family_lines(
        "docker_containers_down_count",
        "Number of stopped containers",
        GAUGE,
        host_labels,
        snapshot.stopped_count,
    )
    lines.append("")

    for container in snapshot.containers.values():
        lines += container_lines(
            container,
            snapshot.hostname,
            include_logs=include_logs,
            include_log_matches=include_log_matches,
        )

    return lines


def render(lines: list[str]) -> str:
    """Join exposition lines into a response body, one newline per line."""
    return "".join(f"{line}\n" for line in lines)
