"""In-memory record store implementation."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from copy import deepcopy
from typing import Any

from audio_migrator.domain.entities import CandidateFilter, UpdatePayload, WorkItem
from audio_migrator.domain.errors import RecordUpdateError
from audio_migrator.domain.ports import RecordStore
from audio_migrator.infrastructure.records.record_schema import RecordSchema


class InMemoryRecordStore(RecordStore):
    """Record store backed by process memory, keyed by record id."""

    def __init__(
        self,
        records: Iterable[Mapping[str, Any]] = (),
        schema: RecordSchema | None = None,
    ) -> None:
        self._schema = schema or RecordSchema()
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()
        self.update_calls: list[tuple[str, dict[str, str]]] = []
        for record in records:
            self._records[str(record[self._schema.id_column])] = dict(record)

    async def query(self, filters: CandidateFilter) -> list[WorkItem]:
        """Return matching records in insertion order."""

        async with self._lock:
            rows = [deepcopy(row) for row in self._records.values() if self._matches(row, filters)]
        return self._schema.to_work_items(rows)

    async def update(self, item_id: str, payload: UpdatePayload) -> None:
        """Overwrite the payload columns of one record."""

        columns = self._schema.to_columns(payload)
        async with self._lock:
            record = self._records.get(item_id)
            if record is None:
                raise RecordUpdateError(f"Record '{item_id}' does not exist.")
            record.update(columns)
            self.update_calls.append((item_id, dict(columns)))

    async def close(self) -> None:
        return None

    def get(self, item_id: str) -> dict[str, Any] | None:
        """Return a copy of one stored record."""

        record = self._records.get(item_id)
        return None if record is None else deepcopy(record)

    def _matches(self, row: Mapping[str, Any], filters: CandidateFilter) -> bool:
        locators = (
            row.get(self._schema.primary_locator_column),
            row.get(self._schema.secondary_locator_column),
        )
        if not any(
            isinstance(locator, str) and locator.endswith(filters.extension)
            for locator in locators
        ):
            return False
        if filters.language_tag is None:
            return True
        languages = row.get(self._schema.language_column) or []
        return filters.language_tag in languages


__all__ = ["InMemoryRecordStore"]
