"""StatsCollector - one-shot resource stats for every running container.

Each container gets one stats query; the returned document is decoded facet
by facet (cpu, memory, network, io, pids). A facet that is present but carries
a malformed field yields zero for that field. A facet whose object is missing
altogether is recorded in ``ResourceSample.missing_facets`` so the encoder
can leave its metrics out instead of exporting zeros.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from docker_exporter.collectors.base import BaseStage
from docker_exporter.collectors.fanout import FanOut
from docker_exporter.core.constants import NANOSECONDS_PER_SECOND
from docker_exporter.core.exceptions import StatsDecodeError
from docker_exporter.core.schemas import NetworkMode, ResourceSample
from docker_exporter.gateway.base import RuntimeGateway

logger = logging.getLogger(__name__)

CPU_FIELDS = ("total_usage", "usage_in_usermode", "usage_in_kernelmode")
MEMORY_FIELDS = ("limit", "usage")
NETWORK_FIELDS = ("rx_bytes", "rx_packets", "tx_bytes", "tx_packets")


def _number(value: Any) -> float | None:
    """Return a non-negative JSON number, or None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0:
        return None
    return value


def _count(value: Any) -> int:
    number = _number(value)
    return int(number) if number is not None else 0


def _mapping(value: Any) -> Mapping[str, Any] | None:
    return value if isinstance(value, Mapping) else None


def _has_any(facet: Mapping[str, Any], fields: Sequence[str]) -> bool:
    return any(name in facet for name in fields)


class StatsCollector(BaseStage[ResourceSample]):
    """Stage collecting one ResourceSample per container.

    Example:
        ```python
        collector = StatsCollector(gateway, fanout, network_mode=NetworkMode.FIRST)
        samples = collector.collect(discovery.ids)
        ```
    """

    def __init__(
        self,
        gateway: RuntimeGateway,
        fanout: FanOut,
        network_mode: NetworkMode = NetworkMode.FIRST,
    ) -> None:
        """Initialize the stats collector.

        Args:
            gateway: Runtime gateway
            fanout: Shared fan-out executor
            network_mode: Take the first interface only, or sum all interfaces
        """
        super().__init__(gateway, fanout)
        self._network_mode = network_mode

    @property
    def name(self) -> str:
        return "stats"

    def collect(self, ids: Sequence[str]) -> dict[str, ResourceSample]:
        outcomes = self._fanout.run(self.name, ids, self._fetch)
        return {o.key: o.value for o in outcomes if o.ok and o.value is not None}

    def _fetch(self, container_id: str) -> ResourceSample:
        stats = self._gateway.stats(container_id)
        return self.parse_stats(container_id, stats)

    def parse_stats(self, container_id: str, stats: Any) -> ResourceSample:
        """Decode a Docker stats document into a ResourceSample.

        Args:
            container_id: Container the document belongs to
            stats: Decoded JSON from the stats endpoint

        Returns:
            ResourceSample; undecodable facets are listed in missing_facets

        Raises:
            StatsDecodeError: If the document is not a JSON object
        """
        if not isinstance(stats, Mapping):
            raise StatsDecodeError(
                f"Stats for {container_id[:12]} is {type(stats).__name__}, expected an object"
            )

        fields: dict[str, Any] = {}
        missing: set[str] = set()

        for facet, parse in (
            ("cpu", self._parse_cpu),
            ("memory", self._parse_memory),
            ("network", self._parse_network),
            ("io", self._parse_blkio),
            ("pids", self._parse_pids),
        ):
            values = parse(stats)
            if values is None:
                missing.add(facet)
            else:
                fields.update(values)

        if missing:
            logger.debug(f"Stats for {container_id[:12]} missing facets: {sorted(missing)}")

        return ResourceSample(id=container_id, missing_facets=frozenset(missing), **fields)

    def _parse_cpu(self, stats: Mapping[str, Any]) -> dict[str, float] | None:
        """CPU counters converted from nanoseconds to seconds."""
        cpu_stats = _mapping(stats.get("cpu_stats"))
        cpu_usage = _mapping(cpu_stats.get("cpu_usage")) if cpu_stats is not None else None
        if cpu_usage is None or not _has_any(cpu_usage, CPU_FIELDS):
            return None

        def seconds(name: str) -> float:
            value = _number(cpu_usage.get(name))
            return value / NANOSECONDS_PER_SECOND if value is not None else 0.0

        return {
            "cpu_total_seconds": seconds("total_usage"),
            "cpu_user_seconds": seconds("usage_in_usermode"),
            "cpu_kernel_seconds": seconds("usage_in_kernelmode"),
        }

    def _parse_memory(self, stats: Mapping[str, Any]) -> dict[str, int] | None:
        memory_stats = _mapping(stats.get("memory_stats"))
        if memory_stats is None or not _has_any(memory_stats, MEMORY_FIELDS):
            return None

        return {
            "mem_limit_bytes": _count(memory_stats.get("limit")),
            "mem_usage_bytes": _count(memory_stats.get("usage")),
        }

    def _parse_network(self, stats: Mapping[str, Any]) -> dict[str, int] | None:
        """Network counters of the first interface, or of all interfaces summed.

        "First" is the first interface in document order, which is the order
        the runtime serialized them in.
        """
        networks = _mapping(stats.get("networks"))
        if not networks:
            return None

        if self._network_mode == NetworkMode.FIRST:
            interfaces = [_mapping(next(iter(networks.values())))]
        else:
            interfaces = [_mapping(v) for v in networks.values()]
        interfaces = [i for i in interfaces if i is not None]
        if not interfaces:
            return None

        def total(name: str) -> int:
            return sum(_count(iface.get(name)) for iface in interfaces)

        return {
            "net_rx_bytes": total("rx_bytes"),
            "net_rx_packets": total("rx_packets"),
            "net_tx_bytes": total("tx_bytes"),
            "net_tx_packets": total("tx_packets"),
        }

    def _parse_blkio(self, stats: Mapping[str, Any]) -> dict[str, int] | None:
        """Block I/O bytes from io_service_bytes_recursive.

        Entries with op "read" are summed into the read counter. Every other
        op (write, sync, async, total, ...) is summed into the write counter.
        Docker reports null instead of an empty list when nothing was read or
        written, which decodes as zeros.
        """
        blkio_stats = _mapping(stats.get("blkio_stats"))
        if blkio_stats is None or "io_service_bytes_recursive" not in blkio_stats:
            return None

        io_bytes = blkio_stats["io_service_bytes_recursive"]
        if io_bytes is None:
            io_bytes = []
        if not isinstance(io_bytes, list):
            return None

        read_bytes = 0
        write_bytes = 0

        for entry in io_bytes:
            if not isinstance(entry, Mapping):
                continue
            op = entry.get("op")
            value = _count(entry.get("value"))
            if isinstance(op, str) and op.lower() == "read":
                read_bytes += value
            else:
                write_bytes += value

        return {"io_read_bytes": read_bytes, "io_write_bytes": write_bytes}

    def _parse_pids(self, stats: Mapping[str, Any]) -> dict[str, int] | None:
        pids_stats = _mapping(stats.get("pids_stats"))
        if pids_stats is None or "current" not in pids_stats:
            return None
        return {"pid_count": _count(pids_stats.get("current"))}
