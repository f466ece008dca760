"""Base stage abstract class for per-container collection.

Each stage fans one or more runtime queries per container out over the shared
FanOut executor and merges the successful outcomes into a mapping keyed by
container ID. Failed containers are simply absent from that mapping.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, TypeVar

from docker_exporter.collectors.fanout import FanOut
from docker_exporter.gateway.base import RuntimeGateway

SampleT = TypeVar("SampleT")


class BaseStage(ABC, Generic[SampleT]):
    """Abstract base class for collector stages.

    Implementations:
    - StatsCollector: one-shot resource stats
    - LogCollector: stdout/stderr line counts
    - InspectCollector: container start time
    """

    def __init__(self, gateway: RuntimeGateway, fanout: FanOut) -> None:
        self._gateway = gateway
        self._fanout = fanout

    @property
    @abstractmethod
    def name(self) -> str:
        """Stage name used in log messages."""
        pass

    @abstractmethod
    def collect(self, ids: Sequence[str]) -> dict[str, SampleT]:
        """Collect one sample per container.

        Args:
            ids: Container IDs of the current working set

        Returns:
            Samples keyed by container ID; IDs whose queries failed are absent
        """
        pass
