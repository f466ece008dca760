"""InspectCollector - container start time.

Parses State.StartedAt from the inspect document. Docker writes RFC 3339
timestamps with nanosecond fractions (2024-05-01T10:00:00.123456789Z), which
are truncated to microseconds before parsing.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from docker_exporter.collectors.base import BaseStage
from docker_exporter.core.schemas import StartSample

logger = logging.getLogger(__name__)

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> float:
    """Parse an RFC 3339 timestamp into whole Unix epoch seconds.

    Args:
        value: Timestamp such as 2024-05-01T10:00:00.123456789Z

    Returns:
        Seconds since the epoch, fraction truncated toward the past

    Raises:
        ValueError: If the timestamp is not RFC 3339
    """
    match = _RFC3339.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Not an RFC 3339 timestamp: {value!r}")

    text = match.group("base").replace("t", "T").replace(" ", "T")
    fraction = match.group("fraction")
    if fraction:
        text += "." + fraction[:6].ljust(6, "0")
    offset = match.group("offset")
    text += "+00:00" if offset in ("Z", "z") else offset

    started = datetime.fromisoformat(text)
    if started.tzinfo is None:
        started = started.replace(tzinfo=UTC)
    return float(math.floor(started.timestamp()))


class InspectCollector(BaseStage[StartSample]):
    """Stage collecting one StartSample per container."""

    @property
    def name(self) -> str:
        return "inspect"

    def collect(self, ids: Sequence[str]) -> dict[str, StartSample]:
        outcomes = self._fanout.run(self.name, ids, self._fetch)
        return {o.key: o.value for o in outcomes if o.ok and o.value is not None}

    def _fetch(self, container_id: str) -> StartSample:
        inspect: dict[str, Any] = self._gateway.inspect(container_id)
        started_at = (inspect.get("State") or {}).get("StartedAt")
        if not started_at:
            raise ValueError(f"Inspect data of {container_id[:12]} has no State.StartedAt")
        return StartSample(id=container_id, started_at_unix_seconds=parse_rfc3339(started_at))
