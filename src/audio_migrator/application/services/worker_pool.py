"""Bounded worker pool draining a shared work queue."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from audio_migrator.domain.entities import ItemResult, WorkItem
from audio_migrator.domain.progress import BatchCounters

logger = logging.getLogger(__name__)

ItemProcessor = Callable[[WorkItem], Awaitable[ItemResult]]
ProgressCallback = Callable[[BatchCounters], Awaitable[None]]


class WorkQueue:
    """FIFO of pending work items shared by all workers."""

    def __init__(self, items: Iterable[WorkItem] = ()) -> None:
        self._items: deque[WorkItem] = deque(items)
        self._lock = asyncio.Lock()

    async def pop(self) -> WorkItem | None:
        """Remove and return the next item, or `None` once drained."""

        async with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)


@dataclass(slots=True)
class _BatchTally:
    """Mutable counters shared by workers; mutated only under `lock`."""

    total: int
    completed: int = 0
    failed: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def record(self, succeeded: bool) -> BatchCounters:
        async with self.lock:
            if succeeded:
                self.completed += 1
            else:
                self.failed += 1
            return self.snapshot()

    def snapshot(self) -> BatchCounters:
        return BatchCounters(total=self.total, completed=self.completed, failed=self.failed)


async def log_progress(counters: BatchCounters) -> None:
    """Default progress callback writing one log line per finished item."""

    logger.info("Progress: %s", counters.describe())


class WorkerPool:
    """Run a fixed number of workers until the shared queue is empty.

    Each item is popped by exactly one worker. Per-item outcomes are reduced to
    success or failure; failed items are not retried.
    """

    def __init__(
        self,
        processor: ItemProcessor,
        progress_callback: ProgressCallback | None = log_progress,
    ) -> None:
        self._processor = processor
        self._progress_callback = progress_callback

    async def run_all(
        self,
        items: Iterable[WorkItem] | WorkQueue,
        concurrency: int,
    ) -> BatchCounters:
        """Drain `items` with `concurrency` workers and return the final counters."""

        if concurrency < 1:
            raise ValueError("concurrency must be >= 1.")

        queue = items if isinstance(items, WorkQueue) else WorkQueue(items)
        tally = _BatchTally(total=len(queue))
        workers = [
            asyncio.create_task(
                self._worker(queue, tally),
                name=f"migration-worker-{index}",
            )
            for index in range(concurrency)
        ]
        await asyncio.gather(*workers)
        return tally.snapshot()

    async def _worker(self, queue: WorkQueue, tally: _BatchTally) -> None:
        while True:
            item = await queue.pop()
            if item is None:
                return

            succeeded = await self._process(item)
            counters = await tally.record(succeeded)
            await self._report(counters)

    async def _process(self, item: WorkItem) -> bool:
        try:
            result = await self._processor(item)
        except Exception:  # noqa: BLE001
            logger.exception("[%s] Processor raised; counting item as failed.", item.item_id)
            return False
        return result.succeeded

    async def _report(self, counters: BatchCounters) -> None:
        if self._progress_callback is None:
            return
        try:
            await self._progress_callback(counters)
        except Exception:  # noqa: BLE001
            logger.exception("Progress callback failed.")


__all__ = ["ItemProcessor", "ProgressCallback", "WorkQueue", "WorkerPool", "log_progress"]
