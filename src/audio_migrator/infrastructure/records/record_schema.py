"""Column mapping shared by record store adapters."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from audio_migrator.domain.entities import UpdateField, UpdatePayload, WorkItem

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RecordSchema:
    """Names of the table and columns holding migrated records."""

    table: str = "episodes"
    id_column: str = "id"
    primary_locator_column: str = "audio_file"
    secondary_locator_column: str = "audioFile_dubbing"
    language_column: str = "language"

    def column_for(self, name: UpdateField) -> str:
        if name is UpdateField.PRIMARY_URL:
            return self.primary_locator_column
        return self.secondary_locator_column

    def to_columns(self, payload: UpdatePayload) -> dict[str, str]:
        """Translate payload fields to column names."""

        return {self.column_for(name): value for name, value in payload.fields.items()}

    def to_work_item(self, row: Mapping[str, Any]) -> WorkItem | None:
        """Build a work item from a row; rows without a primary locator are skipped."""

        item_id = row.get(self.id_column)
        primary = row.get(self.primary_locator_column)
        secondary = row.get(self.secondary_locator_column)
        if item_id is None or not primary:
            logger.warning(
                "Skipping record %r: missing %s.",
                item_id,
                self.id_column if item_id is None else self.primary_locator_column,
            )
            return None
        return WorkItem(
            item_id=str(item_id),
            primary_locator=str(primary),
            secondary_locator=str(secondary) if secondary else None,
        )

    def to_work_items(self, rows: Iterable[Mapping[str, Any]]) -> list[WorkItem]:
        items: list[WorkItem] = []
        for row in rows:
            item = self.to_work_item(row)
            if item is not None:
                items.append(item)
        return items


__all__ = ["RecordSchema"]
