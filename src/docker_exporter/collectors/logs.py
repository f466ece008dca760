"""LogCollector - stdout/stderr line counts per container.

Two queries per container, one per stream. Each fetches the whole log buffer
and counts newline-terminated lines; optionally it also counts lines matching
a custom regular expression. The two stream results are joined by container
ID once the stage barrier has released.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from docker_exporter.collectors.base import BaseStage
from docker_exporter.collectors.fanout import FanOut
from docker_exporter.core.schemas import LogSample, LogStream
from docker_exporter.gateway.base import RuntimeGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamCount:
    """Line and match counts of one stream."""

    lines: int = 0
    matches: int = 0


def count_lines(data: bytes | str, pattern: re.Pattern[str] | None = None) -> StreamCount:
    """Count lines, and lines matching ``pattern``, in a raw log buffer.

    The buffer is split on newlines; the segment after the last newline is
    not counted as a line. Matching is applied to every segment.

    Args:
        data: Raw log output
        pattern: Optional pattern searched in each line

    Returns:
        StreamCount for the buffer
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    segments = text.split("\n")
    lines = len(segments) - 1

    matches = 0
    if pattern is not None and lines > 0:
        matches = sum(1 for segment in segments if pattern.search(segment))

    return StreamCount(lines=lines, matches=matches)


class LogCollector(BaseStage[LogSample]):
    """Stage collecting one LogSample per container.

    If only one stream of a container could be read, the sample carries that
    stream and the other reads as zero. A container with no readable stream
    has no sample.
    """

    def __init__(
        self,
        gateway: RuntimeGateway,
        fanout: FanOut,
        pattern: re.Pattern[str] | None = None,
    ) -> None:
        """Initialize the log collector.

        Args:
            gateway: Runtime gateway
            fanout: Shared fan-out executor
            pattern: Custom line pattern; None disables match counting
        """
        super().__init__(gateway, fanout)
        self._pattern = pattern

    @property
    def name(self) -> str:
        return "logs"

    def collect(self, ids: Sequence[str]) -> dict[str, LogSample]:
        keys = [(container_id, stream) for container_id in ids for stream in LogStream]
        outcomes = self._fanout.run(self.name, keys, self._fetch)

        fields: dict[str, dict[str, Any]] = {}
        streams: dict[str, set[LogStream]] = {}
        for outcome in outcomes:
            if not outcome.ok or outcome.value is None:
                continue
            container_id, stream = outcome.key
            count = outcome.value
            fields.setdefault(container_id, {}).update(
                {f"{stream.value}_lines": count.lines, f"{stream.value}_matches": count.matches}
            )
            streams.setdefault(container_id, set()).add(stream)

        return {
            container_id: LogSample(
                id=container_id, streams=frozenset(streams[container_id]), **values
            )
            for container_id, values in fields.items()
        }

    def _fetch(self, key: tuple[str, LogStream]) -> StreamCount:
        container_id, stream = key
        data = self._gateway.logs(
            container_id,
            stdout=stream == LogStream.STDOUT,
            stderr=stream == LogStream.STDERR,
        )
        return count_lines(data, self._pattern)
