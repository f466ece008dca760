"""Pydantic schemas for the Docker exporter.

This module defines the data contracts of one collection cycle: the containers
found by discovery, the per-container samples produced by each collector stage,
and the snapshot the aggregator joins them into.

All models are frozen; a snapshot is built once per scrape and only read after.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class NetworkMode(str, Enum):
    """Policy for reducing per-interface network counters to one value."""

    FIRST = "first"  # First interface in document order
    SUM = "sum"  # Sum over all interfaces


class LogStream(str, Enum):
    """Container output streams counted by the log collector."""

    STDOUT = "stdout"
    STDERR = "stderr"


class ContainerInfo(BaseModel):
    """A container as listed by the runtime.

    Attributes:
        id: Full container ID
        name: Display name without the leading '/'
        state: Coarse lifecycle state (running, exited, ...)
        status: Human-readable status (e.g. 'Up 3 hours')
    """

    id: str = Field(..., min_length=1)
    name: str = ""
    state: str = ""
    status: str = ""

    model_config = {"frozen": True}


class ResourceSample(BaseModel):
    """One-shot resource measurement for a container.

    Facets listed in ``missing_facets`` could not be read from the stats
    document; their fields hold zero and must not be exported.
    """

    id: str
    # CPU (seconds)
    cpu_total_seconds: float = Field(default=0.0, ge=0)
    cpu_user_seconds: float = Field(default=0.0, ge=0)
    cpu_kernel_seconds: float = Field(default=0.0, ge=0)
    # Memory (bytes)
    mem_limit_bytes: int = Field(default=0, ge=0)
    mem_usage_bytes: int = Field(default=0, ge=0)
    # Network
    net_rx_bytes: int = Field(default=0, ge=0)
    net_rx_packets: int = Field(default=0, ge=0)
    net_tx_bytes: int = Field(default=0, ge=0)
    net_tx_packets: int = Field(default=0, ge=0)
    # Block I/O (bytes)
    io_read_bytes: int = Field(default=0, ge=0)
    io_write_bytes: int = Field(default=0, ge=0)
    # Processes and threads
    pid_count: int = Field(default=0, ge=0)
    missing_facets: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @property
    def is_partial(self) -> bool:
        """True if at least one facet could not be measured."""
        return bool(self.missing_facets)

    def has_facet(self, facet: str) -> bool:
        return facet not in self.missing_facets


class LogSample(BaseModel):
    """Line counts of a container's stdout and stderr logs.

    ``streams`` lists the streams that were fetched successfully; a stream
    missing from it reads as zero.
    """

    id: str
    stdout_lines: int = Field(default=0, ge=0)
    stderr_lines: int = Field(default=0, ge=0)
    stdout_matches: int = Field(default=0, ge=0)
    stderr_matches: int = Field(default=0, ge=0)
    streams: frozenset[LogStream] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @property
    def total_lines(self) -> int:
        return self.stdout_lines + self.stderr_lines

    @property
    def total_matches(self) -> int:
        return self.stdout_matches + self.stderr_matches


class StartSample(BaseModel):
    """Container start time as Unix epoch seconds."""

    id: str
    started_at_unix_seconds: float

    model_config = {"frozen": True}


class ContainerSnapshot(BaseModel):
    """Joined view of one container for one cycle.

    Absent samples are None: the corresponding metric families are omitted.
    """

    info: ContainerInfo
    resources: ResourceSample | None = None
    logs: LogSample | None = None
    started: StartSample | None = None

    model_config = {"frozen": True}


class Snapshot(BaseModel):
    """Complete result of one collection cycle, keyed by container ID.

    Keys follow discovery order and only contain containers that were running
    when the cycle started.
    """

    hostname: str = ""
    running_count: int = Field(default=0, ge=0)
    stopped_count: int = Field(default=0, ge=0)
    containers: dict[str, ContainerSnapshot] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def ids(self) -> list[str]:
        return list(self.containers)
