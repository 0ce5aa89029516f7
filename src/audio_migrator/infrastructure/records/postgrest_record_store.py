"""PostgREST (Supabase REST) record store implementation."""

from __future__ import annotations

from typing import Any

import httpx

from audio_migrator.domain.entities import CandidateFilter, UpdatePayload, WorkItem
from audio_migrator.domain.errors import CandidateQueryError, RecordUpdateError
from audio_migrator.domain.ports import RecordStore
from audio_migrator.infrastructure.records.record_schema import RecordSchema


class PostgrestRecordStore(RecordStore):
    """Record store speaking the PostgREST dialect exposed by Supabase."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        schema: RecordSchema | None = None,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = self._normalize_base_url(base_url)
        self._api_key = api_key
        self._schema = schema or RecordSchema()
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def query(self, filters: CandidateFilter) -> list[WorkItem]:
        """`GET /rest/v1/<table>` with locator and language filters."""

        url = self._table_url()
        try:
            response = await self._get_client().get(url, params=self._query_params(filters))
        except httpx.HTTPError as exc:
            raise CandidateQueryError(f"GET {url} failed: {exc}") from exc
        if not response.is_success:
            raise CandidateQueryError(self._failure_message(response))

        try:
            rows = response.json()
        except ValueError as exc:
            raise CandidateQueryError(f"GET {url} returned invalid JSON: {exc}") from exc
        if not isinstance(rows, list):
            raise CandidateQueryError(f"GET {url} returned {type(rows).__name__}, expected a list.")
        return self._schema.to_work_items(row for row in rows if isinstance(row, dict))

    async def update(self, item_id: str, payload: UpdatePayload) -> None:
        """`PATCH /rest/v1/<table>?<id>=eq.<item_id>` with the payload columns.

        The updated ids are requested back so that a PATCH matching no row is
        reported as a failure instead of an empty success.
        """

        url = self._table_url()
        id_column = self._schema.id_column
        try:
            response = await self._get_client().patch(
                url,
                params={id_column: f"eq.{item_id}", "select": id_column},
                json=self._schema.to_columns(payload),
                headers={"Prefer": "return=representation"},
            )
        except httpx.HTTPError as exc:
            raise RecordUpdateError(f"PATCH {url} failed: {exc}") from exc
        if not response.is_success:
            raise RecordUpdateError(self._failure_message(response))

        try:
            rows = response.json()
        except ValueError as exc:
            raise RecordUpdateError(f"PATCH {url} returned invalid JSON: {exc}") from exc
        if not isinstance(rows, list):
            raise RecordUpdateError(f"PATCH {url} returned {type(rows).__name__}, expected a list.")
        if not rows:
            raise RecordUpdateError(f"No record with {id_column}={item_id} to update.")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _query_params(self, filters: CandidateFilter) -> dict[str, str]:
        schema = self._schema
        pattern = f"*{filters.extension}"
        params = {
            "select": ",".join(
                (
                    schema.id_column,
                    schema.primary_locator_column,
                    schema.secondary_locator_column,
                )
            ),
            "or": (
                f"({schema.primary_locator_column}.like.{pattern},"
                f"{schema.secondary_locator_column}.like.{pattern})"
            ),
            "order": f"{schema.id_column}.asc",
        }
        if filters.language_tag is not None:
            params[schema.language_column] = f"cs.{{{filters.language_tag}}}"
        return params

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                },
            )
        return self._client

    def _table_url(self) -> str:
        return f"{self._base_url}/rest/v1/{self._schema.table}"

    def _failure_message(self, response: httpx.Response) -> str:
        return (
            f"{response.request.method} {response.request.url} failed: "
            f"{response.status_code} {self._detail_from_response(response)}"
        )

    def _detail_from_response(self, response: httpx.Response) -> str:
        try:
            payload: Any = response.json()
        except ValueError:
            text = response.text.strip()
            return text or "<no response body>"

        if isinstance(payload, dict):
            message = payload.get("message")
            if isinstance(message, str):
                return message
        return str(payload)

    def _normalize_base_url(self, base_url: str) -> str:
        normalized = base_url.strip().rstrip("/")
        if not normalized:
            raise ValueError("PostgREST base URL cannot be empty.")
        return normalized


__all__ = ["PostgrestRecordStore"]
