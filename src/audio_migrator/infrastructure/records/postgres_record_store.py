"""PostgreSQL record store implementation."""

from __future__ import annotations

import asyncio
from typing import Any

import asyncpg  # type: ignore[import-untyped]

from audio_migrator.domain.entities import CandidateFilter, UpdatePayload, WorkItem
from audio_migrator.domain.errors import CandidateQueryError, RecordUpdateError
from audio_migrator.domain.ports import RecordStore
from audio_migrator.infrastructure.records.record_schema import RecordSchema


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _like_suffix_pattern(suffix: str) -> str:
    escaped = suffix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}"


class PostgresRecordStore(RecordStore):
    """Record store backed by a PostgreSQL table."""

    def __init__(
        self,
        dsn: str,
        schema: RecordSchema | None = None,
        min_pool_size: int = 1,
        max_pool_size: int = 10,
    ) -> None:
        self._dsn = dsn
        self._schema = schema or RecordSchema()
        self._min_pool_size = min_pool_size
        self._max_pool_size = max_pool_size
        self._pool: asyncpg.Pool | None = None
        self._pool_lock = asyncio.Lock()

    async def query(self, filters: CandidateFilter) -> list[WorkItem]:
        """Select records whose locators end with the extension and carry the language."""

        sql, args = self.build_query(filters)
        try:
            pool = await self._get_pool()
            rows = await pool.fetch(sql, *args)
        except (asyncpg.PostgresError, OSError) as exc:
            raise CandidateQueryError(f"Candidate query failed: {exc}") from exc
        return self._schema.to_work_items(dict(row) for row in rows)

    async def update(self, item_id: str, payload: UpdatePayload) -> None:
        """Overwrite payload columns of one row; a missing row is an error."""

        sql, args = self.build_update(item_id, payload)
        try:
            pool = await self._get_pool()
            status = await pool.execute(sql, *args)
        except (asyncpg.PostgresError, OSError) as exc:
            raise RecordUpdateError(f"Update of record '{item_id}' failed: {exc}") from exc
        if status == "UPDATE 0":
            raise RecordUpdateError(f"Record '{item_id}' does not exist.")

    async def close(self) -> None:
        async with self._pool_lock:
            pool = self._pool
            self._pool = None
        if pool is not None:
            await pool.close()

    def build_query(self, filters: CandidateFilter) -> tuple[str, list[Any]]:
        schema = self._schema
        id_column = _quote_identifier(schema.id_column)
        primary = _quote_identifier(schema.primary_locator_column)
        secondary = _quote_identifier(schema.secondary_locator_column)

        args: list[Any] = [_like_suffix_pattern(filters.extension)]
        sql = (
            f"SELECT {id_column}, {primary}, {secondary} "
            f"FROM {_quote_identifier(schema.table)} "
            f"WHERE ({primary} LIKE $1 ESCAPE '\\' OR {secondary} LIKE $1 ESCAPE '\\')"
        )
        if filters.language_tag is not None:
            args.append([filters.language_tag])
            sql += f" AND {_quote_identifier(schema.language_column)} @> $2::text[]"
        sql += f" ORDER BY {id_column} ASC"
        return sql, args

    def build_update(self, item_id: str, payload: UpdatePayload) -> tuple[str, list[Any]]:
        columns = self._schema.to_columns(payload)
        if not columns:
            raise RecordUpdateError(f"Refusing empty update for record '{item_id}'.")

        assignments = []
        args: list[Any] = []
        for index, (column, value) in enumerate(columns.items(), start=1):
            assignments.append(f"{_quote_identifier(column)} = ${index}")
            args.append(value)
        args.append(item_id)
        sql = (
            f"UPDATE {_quote_identifier(self._schema.table)} "
            f"SET {', '.join(assignments)} "
            f"WHERE {_quote_identifier(self._schema.id_column)}::text = ${len(args)}"
        )
        return sql, args

    async def _get_pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool

        async with self._pool_lock:
            if self._pool is None:
                self._pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_pool_size,
                    max_size=self._max_pool_size,
                )
        assert self._pool is not None
        return self._pool


__all__ = ["PostgresRecordStore"]
