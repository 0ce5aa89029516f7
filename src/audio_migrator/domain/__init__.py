"""Domain public API."""

from audio_migrator.domain.entities import (
    CandidateFilter,
    ItemResult,
    TranscodeJob,
    TranscodeOutcome,
    TranscodeParams,
    UpdateField,
    UpdatePayload,
    WorkItem,
)
from audio_migrator.domain.errors import (
    CandidateQueryError,
    ItemPipelineError,
    MigrationError,
    RecordUpdateError,
    TranscodeError,
    TransferError,
)
from audio_migrator.domain.locators import DestinationLayout, locator_to_key
from audio_migrator.domain.ports import ObjectStore, RecordStore, Transcoder
from audio_migrator.domain.progress import BatchCounters

__all__ = [
    "BatchCounters",
    "CandidateFilter",
    "CandidateQueryError",
    "DestinationLayout",
    "ItemPipelineError",
    "ItemResult",
    "MigrationError",
    "ObjectStore",
    "RecordStore",
    "RecordUpdateError",
    "TranscodeError",
    "TranscodeJob",
    "TranscodeOutcome",
    "TranscodeParams",
    "Transcoder",
    "TransferError",
    "UpdateField",
    "UpdatePayload",
    "WorkItem",
    "locator_to_key",
]
