"""Collectors module - per-cycle container discovery and metric collection.

Provides the collection stages run once per scrape:
- discover: running/stopped split of the host's containers
- StatsCollector: one-shot resource stats
- LogCollector: stdout/stderr line counts (optional)
- InspectCollector: container start time

All stages share one bounded FanOut executor.
"""

from __future__ import annotations

from docker_exporter.collectors.base import BaseStage
from docker_exporter.collectors.discovery import DiscoveryResult, container_name, discover
from docker_exporter.collectors.fanout import FanOut, TaskOutcome
from docker_exporter.collectors.logs import LogCollector, StreamCount, count_lines
from docker_exporter.collectors.start_time import InspectCollector, parse_rfc3339
from docker_exporter.collectors.stats import StatsCollector

__all__ = [
    "BaseStage",
    "DiscoveryResult",
    "FanOut",
    "InspectCollector",
    "LogCollector",
    "StatsCollector",
    "StreamCount",
    "TaskOutcome",
    "container_name",
    "count_lines",
    "discover",
    "parse_rfc3339",
]
