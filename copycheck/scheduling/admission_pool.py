"""Admission control for asynchronous jobs.

This module provides the AdmissionPool class, which bounds how many jobs run
at once on the event loop and queues the excess by weight.

Example:
    >>> pool = AdmissionPool(capacity=10)
    >>> digest = await pool.submit(lambda: hasher.compute_digest(path), weight=size)
"""

import asyncio
import time
from typing import Awaitable, Callable, Dict, Optional, TypeVar

from copycheck.models import PoolAnalytics

from .priority_queue import PriorityQueue

# Maximum number of concurrently running jobs
DEFAULT_CAPACITY = 100

T = TypeVar("T")

AnalyticsSink = Callable[[PoolAnalytics], None]


class AdmissionPool:
    """Runs at most `capacity` jobs concurrently, releasing waiters by weight.

    A submitted job starts immediately while fewer than `capacity` jobs are
    running. Otherwise it waits in a PriorityQueue until a running job
    finishes. Every completion, success or failure, performs exactly one
    release: the slot is handed straight to the highest-weight waiter, whose
    running count is taken on its behalf before it wakes up. A job submitted
    in between therefore cannot overtake it.

    All state is touched only from the event loop thread between awaits, so
    no locking is needed. Each instance owns its own queue and counters.

    Attributes:
        capacity: Maximum number of concurrently running jobs.

    Example:
        >>> pool = AdmissionPool(capacity=2, analytics_sink=records.append)
        >>> result = await pool.submit(fetch, weight=1.0)
        >>> pool.stats()
        {'running': 0, 'pending': 0}
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        analytics_sink: Optional[AnalyticsSink] = None,
    ) -> None:
        """Initialize the AdmissionPool.

        Args:
            capacity: Maximum number of concurrently running jobs. Must be
                at least 1. Defaults to DEFAULT_CAPACITY.
            analytics_sink: Optional callable receiving a PoolAnalytics
                record for every job that finishes.

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._analytics_sink = analytics_sink
        self._running = 0
        # Live waiters; cancelled tickets linger in the queue until popped
        self._pending = 0
        self._waiting: PriorityQueue[asyncio.Future] = PriorityQueue()

    @property
    def running(self) -> int:
        return self._running

    @property
    def pending(self) -> int:
        return self._pending

    def stats(self) -> Dict[str, int]:
        """Get the current pool occupancy.

        Returns:
            Dictionary with 'running' and 'pending' job counts.
        """
        return {"running": self._running, "pending": self._pending}

    async def submit(
        self,
        job: Callable[[], Awaitable[T]],
        weight: float,
        on_analytics: Optional[AnalyticsSink] = None,
    ) -> T:
        """Run `job` once a slot is available and return its result.

        Args:
            job: Zero-argument callable returning the awaitable to run.
                It is only called once the job has been admitted.
            weight: Queue priority while waiting; higher runs first.
            on_analytics: Optional callable receiving this job's
                PoolAnalytics record.

        Returns:
            Whatever the job's awaitable returns.

        Raises:
            Any exception raised by the job, unchanged.
        """
        queued_at = time.perf_counter()
        await self._acquire(weight)
        started_at = time.perf_counter()
        succeeded = False
        try:
            result = await job()
            succeeded = True
            return result
        finally:
            self._running -= 1
            self._release_one()
            self._report(queued_at, started_at, succeeded, on_analytics)

    async def _acquire(self, weight: float) -> None:
        if self._running < self.capacity:
            self._running += 1
            return

        ticket = asyncio.get_running_loop().create_future()
        self._waiting.insert(weight, ticket)
        self._pending += 1
        try:
            await ticket
        except asyncio.CancelledError:
            # The slot may already have been handed over before the cancellation landed
            if ticket.done() and not ticket.cancelled():
                self._running -= 1
                self._release_one()
            else:
                ticket.cancel()
                self._pending -= 1
            raise

    def _release_one(self) -> None:
        while not self._waiting.is_empty():
            ticket = self._waiting.extract_max()
            if ticket.done():
                continue
            self._pending -= 1
            self._running += 1
            ticket.set_result(None)
            return

    def _report(
        self,
        queued_at: float,
        started_at: float,
        succeeded: bool,
        on_analytics: Optional[AnalyticsSink],
    ) -> None:
        finished_at = time.perf_counter()
        time_in_queue = started_at - queued_at
        execution_time = finished_at - started_at
        total = time_in_queue + execution_time
        analytics = PoolAnalytics(
            execution_time=execution_time,
            time_in_queue=time_in_queue,
            waiting_ratio=time_in_queue / total if total > 0 else 0.0,
            succeeded=succeeded,
        )
        for sink in (on_analytics, self._analytics_sink):
            if sink is not None:
                sink(analytics)
