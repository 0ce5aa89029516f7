"""Application services."""

from audio_migrator.application.services.item_pipeline import ItemPipeline
from audio_migrator.application.services.migration_batch_service import MigrationBatchService
from audio_migrator.application.services.worker_pool import WorkerPool, WorkQueue, log_progress
from audio_migrator.application.services.workspace import scoped_workspace

__all__ = [
    "ItemPipeline",
    "MigrationBatchService",
    "WorkQueue",
    "WorkerPool",
    "log_progress",
    "scoped_workspace",
]
