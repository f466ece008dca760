"""Collection cycle of the Docker exporter.

One cycle runs discovery, then the stats, log and inspect stages one after
another, joins their outputs into a Snapshot and renders it. Nothing is kept
between cycles apart from the gateway, the fan-out limits and the host name.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from docker_exporter.aggregator import aggregate
from docker_exporter.collectors.discovery import discover
from docker_exporter.collectors.fanout import FanOut
from docker_exporter.collectors.logs import LogCollector
from docker_exporter.collectors.start_time import InspectCollector
from docker_exporter.collectors.stats import StatsCollector
from docker_exporter.core.config import ExporterSettings
from docker_exporter.core.schemas import Snapshot
from docker_exporter.exposition import encode_snapshot, render
from docker_exporter.gateway.base import RuntimeGateway
from docker_exporter.gateway.docker_gateway import DockerGateway

logger = logging.getLogger(__name__)


class DockerExporter:
    """Runs collection cycles against one container runtime.

    Example:
        ```python
        settings = load_config()
        with DockerExporter.from_settings(settings) as exporter:
            print(exporter.scrape())
        ```
    """

    def __init__(
        self,
        gateway: RuntimeGateway,
        settings: ExporterSettings | None = None,
        hostname: str | None = None,
    ) -> None:
        """Initialize the exporter.

        Args:
            gateway: Runtime gateway
            settings: Exporter settings (defaults from the environment)
            hostname: Host label; resolved from the runtime when None

        Raises:
            GatewayUnavailableError: If the host name cannot be resolved
        """
        self.settings = settings if settings is not None else ExporterSettings()
        self._gateway = gateway
        self.hostname = hostname if hostname is not None else gateway.host_name()

        self._fanout = FanOut(
            max_workers=self.settings.max_workers,
            task_timeout_seconds=self.settings.task_timeout_seconds,
        )
        self._stats = StatsCollector(gateway, self._fanout, network_mode=self.settings.network_mode)
        self._logs = LogCollector(gateway, self._fanout, pattern=self.settings.log_pattern)
        self._inspect = InspectCollector(gateway, self._fanout)

        logger.info(
            f"Exporter ready (hostname={self.hostname!r}, max_workers={self.settings.max_workers}, "
            f"log_metrics={self.settings.log_metrics}, "
            f"log_custom_metrics={self.settings.log_custom_metrics})"
        )

    @classmethod
    def from_settings(cls, settings: ExporterSettings) -> DockerExporter:
        """Connect to the Docker daemon from the environment.

        Raises:
            GatewayUnavailableError: If the daemon is unreachable
        """
        gateway = DockerGateway.from_env(timeout=settings.request_timeout_seconds)
        try:
            gateway.ping()
            return cls(gateway, settings)
        except Exception:
            gateway.close()
            raise

    def collect(self) -> Snapshot:
        """Run one collection cycle.

        Raises:
            DiscoveryError: If the container list cannot be fetched
        """
        start = time.monotonic()
        discovery = discover(self._gateway, include_stopped=self.settings.include_stopped)
        ids = discovery.ids

        stats = self._stats.collect(ids)
        logs = self._logs.collect(ids) if self.settings.log_metrics else None
        starts = self._inspect.collect(ids)

        snapshot = aggregate(discovery, stats, logs, starts, self.hostname)

        partial = sum(
            1 for c in snapshot.containers.values() if c.resources is None or c.resources.is_partial
        )
        logger.debug(
            f"Collected {len(ids)} containers in {time.monotonic() - start:.3f}s "
            f"({len(stats)} stats, {len(starts)} start times, {partial} partial)"
        )
        return snapshot

    def encode(self, snapshot: Snapshot) -> list[str]:
        return encode_snapshot(
            snapshot,
            include_logs=self.settings.log_metrics,
            include_log_matches=self.settings.log_metrics and self.settings.log_custom_metrics,
        )

    def scrape(self) -> str:
        """Run one cycle and return the exposition text."""
        return render(self.encode(self.collect()))

    def close(self) -> None:
        self._fanout.shutdown()
        self._gateway.close()

    def __enter__(self) -> DockerExporter:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
