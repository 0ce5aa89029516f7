"""Batch orchestration: load candidates once, then drain them through the pool."""

from __future__ import annotations

import logging

from audio_migrator.application.services.item_pipeline import ItemPipeline
from audio_migrator.application.services.worker_pool import (
    ProgressCallback,
    WorkerPool,
    log_progress,
)
from audio_migrator.domain.entities import CandidateFilter, WorkItem
from audio_migrator.domain.errors import CandidateQueryError
from audio_migrator.domain.ports import RecordStore
from audio_migrator.domain.progress import BatchCounters

logger = logging.getLogger(__name__)


class MigrationBatchService:
    """Run one migration batch end to end."""

    def __init__(
        self,
        record_store: RecordStore,
        pipeline: ItemPipeline,
        candidate_filter: CandidateFilter,
        concurrency: int = 5,
        progress_callback: ProgressCallback | None = log_progress,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1.")
        self._record_store = record_store
        self._pipeline = pipeline
        self._candidate_filter = candidate_filter
        self._concurrency = concurrency
        self._worker_pool = WorkerPool(
            processor=pipeline.process,
            progress_callback=progress_callback,
        )

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def run(self) -> BatchCounters:
        """Process every candidate.

        Raises `CandidateQueryError` when the candidate set cannot be loaded;
        no item is processed in that case.
        """

        try:
            items = await self._load_candidates()
            if not items:
                logger.info("Nothing to convert: no records match %s.", self._candidate_filter)
                return BatchCounters()

            logger.info(
                "Starting migration of %d item(s) with %d worker(s).",
                len(items),
                self._concurrency,
            )
            counters = await self._worker_pool.run_all(items, self._concurrency)
            logger.info("Migration finished: %s", counters.describe())
            return counters
        finally:
            await self._record_store.close()

    async def _load_candidates(self) -> list[WorkItem]:
        try:
            return await self._record_store.query(self._candidate_filter)
        except CandidateQueryError:
            logger.error("Could not load candidate records.")
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error("Could not load candidate records: %s", exc)
            raise CandidateQueryError(str(exc)) from exc


__all__ = ["MigrationBatchService"]
