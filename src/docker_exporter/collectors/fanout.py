"""Bounded fan-out/fan-in executor for per-container runtime queries.

A collection stage submits one task per key (a container ID, or an ID and a
log stream) to a thread pool of its own and waits on a barrier that is
released when every task has finished, failed or run past its deadline.
Outcomes are returned as an immutable tuple and merged by the caller in a
single thread.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Hashable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from docker_exporter.core.exceptions import TaskTimeoutError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class TaskOutcome(Generic[K, V]):
    """Result of one fan-out task: either a value or the error that ended it."""

    key: K
    value: V | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def describe_key(key: Any) -> str:
    """Short, log-friendly form of a task key."""
    if isinstance(key, tuple):
        return "/".join(describe_key(part) for part in key)
    if hasattr(key, "value"):
        return str(key.value)
    return str(key)[:12]


class FanOut:
    """Thread pools with a concurrency cap and per-task deadlines.

    The cap is independent of the number of containers. A task that runs
    longer than ``task_timeout_seconds`` is reported as a TaskTimeoutError and
    abandoned; the gateway's request timeout ends the underlying call. Tasks
    still queued when the stage deadline passes are cancelled.

    Every ``run`` gets a pool of its own, so threads left behind by abandoned
    tasks never hold workers needed by the next stage or the next scrape.

    Example:
        ```python
        fanout = FanOut(max_workers=8, task_timeout_seconds=5.0)
        outcomes = fanout.run("stats", ids, gateway.stats)
        stats = {o.key: o.value for o in outcomes if o.ok}
        fanout.shutdown()
        ```
    """

    def __init__(self, max_workers: int = 16, task_timeout_seconds: float = 10.0) -> None:
        """Initialize the executor.

        Args:
            max_workers: Maximum number of tasks of one stage running at once
            task_timeout_seconds: Deadline for a single task, counted from its start
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        if task_timeout_seconds <= 0:
            raise ValueError(f"task_timeout_seconds must be > 0, got {task_timeout_seconds}")

        self._max_workers = max_workers
        self._task_timeout = task_timeout_seconds
        self._closed = False

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def task_timeout_seconds(self) -> float:
        return self._task_timeout

    def stage_timeout(self, task_count: int) -> float:
        """Upper bound on the duration of a stage with ``task_count`` tasks."""
        waves = math.ceil(task_count / self._max_workers)
        return self._task_timeout * (waves + 1)

    def run(
        self,
        stage: str,
        keys: Iterable[K],
        task: Callable[[K], V],
    ) -> tuple[TaskOutcome[K, V], ...]:
        """Run ``task`` for every key and wait for all of them.

        Args:
            stage: Stage name used in log messages and thread names
            keys: One task is submitted per key
            task: Callable issuing the runtime query for one key

        Returns:
            One TaskOutcome per key, in key order

        Raises:
            RuntimeError: If the executor has been shut down
        """
        if self._closed:
            raise RuntimeError("FanOut has been shut down")

        keys = list(keys)
        if not keys:
            return ()

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(keys)),
            thread_name_prefix=f"collector-{stage}",
        )
        try:
            return self._run(executor, stage, keys, task)
        finally:
            # Abandoned tasks keep their threads until the request timeout ends them
            executor.shutdown(wait=False, cancel_futures=True)

    def _run(
        self,
        executor: ThreadPoolExecutor,
        stage: str,
        keys: list[K],
        task: Callable[[K], V],
    ) -> tuple[TaskOutcome[K, V], ...]:
        start_times: list[float | None] = [None] * len(keys)

        def _call(index: int) -> V:
            start_times[index] = time.monotonic()
            return task(keys[index])

        futures: dict[Future[V], int] = {executor.submit(_call, i): i for i in range(len(keys))}
        outcomes: list[TaskOutcome[K, V] | None] = [None] * len(keys)
        stage_deadline = time.monotonic() + self.stage_timeout(len(keys))
        pending = set(futures)

        while pending:
            wait_for = self._next_wait(pending, futures, start_times, stage_deadline)
            done, pending = wait(pending, timeout=wait_for, return_when=FIRST_COMPLETED)

            for future in done:
                index = futures[future]
                outcomes[index] = self._outcome(stage, keys[index], future)

            now = time.monotonic()
            expired = set()
            for future in pending:
                index = futures[future]
                started = start_times[index]
                if started is not None and now - started >= self._task_timeout:
                    reason = f"exceeded {self._task_timeout:g}s deadline"
                elif now >= stage_deadline:
                    reason = "stage deadline passed before the task finished"
                else:
                    continue
                future.cancel()
                error = TaskTimeoutError(f"{stage} task for {describe_key(keys[index])} {reason}")
                logger.warning(str(error))
                outcomes[index] = TaskOutcome(key=keys[index], error=error)
                expired.add(future)
            pending -= expired

        return tuple(o for o in outcomes if o is not None)

    def _next_wait(
        self,
        pending: set[Future[V]],
        futures: dict[Future[V], int],
        start_times: list[float | None],
        stage_deadline: float,
    ) -> float:
        """Seconds until the nearest task or stage deadline."""
        now = time.monotonic()
        nearest = stage_deadline
        for future in pending:
            started = start_times[futures[future]]
            if started is not None:
                nearest = min(nearest, started + self._task_timeout)
        # Tasks may start while we wait, so poll at a fraction of the deadline
        return max(0.0, min(nearest - now, self._task_timeout / 4))

    @staticmethod
    def _outcome(stage: str, key: K, future: Future[V]) -> TaskOutcome[K, V]:
        try:
            value = future.result()
        except Exception as e:
            logger.warning(f"{stage} failed for {describe_key(key)}: {e}")
            return TaskOutcome(key=key, error=e)
        return TaskOutcome(key=key, value=value)

    def shutdown(self) -> None:
        """Refuse further stages."""
        self._closed = True
