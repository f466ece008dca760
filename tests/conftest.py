"""Shared fixtures for the exporter tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from docker_exporter.collectors.fanout import FanOut
from tests.fakes import DB_ID, OLD_ID, WEB_ID, FakeGateway, container_entry, stats_document


@pytest.fixture
def fanout() -> Iterator[FanOut]:
    pool = FanOut(max_workers=4, task_timeout_seconds=2.0)
    yield pool
    pool.shutdown()


@pytest.fixture
def gateway() -> FakeGateway:
    """Two running containers and one exited container, all queries answering."""
    return FakeGateway(
        containers=[
            container_entry(WEB_ID, "web"),
            container_entry(DB_ID, "db"),
            container_entry(OLD_ID, "old", state="exited"),
        ],
        stats={WEB_ID: stats_document(), DB_ID: stats_document(total_usage=1_500_000_000)},
        logs={
            (WEB_ID, "stdout"): b'GET / 200\n{"level":"error"}\nGET /health 200\n',
            (WEB_ID, "stderr"): b'"ERROR" boom\n',
            (DB_ID, "stdout"): b"ready\n",
            (DB_ID, "stderr"): b"",
        },
        inspect={
            WEB_ID: {"State": {"StartedAt": "2024-05-01T10:00:00.123456789Z"}},
            DB_ID: {"State": {"StartedAt": "2024-05-01T09:00:00Z"}},
        },
    )
