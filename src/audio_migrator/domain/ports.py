"""Ports for object storage, transcoding, and record persistence."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from audio_migrator.domain.entities import (
    CandidateFilter,
    TranscodeJob,
    TranscodeOutcome,
    UpdatePayload,
    WorkItem,
)


class ObjectStore(Protocol):
    """Remote object storage port."""

    def get(self, bucket: str, key: str) -> AsyncIterator[bytes]:
        """Stream object bytes in chunks."""

    async def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        """Store an object, overwriting any existing one."""


class Transcoder(Protocol):
    """External transcoder port."""

    async def run(self, job: TranscodeJob) -> TranscodeOutcome:
        """Run one job to completion and return its exit status."""


class RecordStore(Protocol):
    """Persistence port for the migrated records."""

    async def query(self, filters: CandidateFilter) -> list[WorkItem]:
        """Return the candidate set matching `filters`."""

    async def update(self, item_id: str, payload: UpdatePayload) -> None:
        """Overwrite the payload fields of one record."""

    async def close(self) -> None:
        """Release connections held by the store."""


__all__ = ["ObjectStore", "RecordStore", "Transcoder"]
