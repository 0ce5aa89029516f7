"""Per-item download, transcode, upload, and record update pipeline."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from audio_migrator.application.services.workspace import scoped_workspace
from audio_migrator.domain.entities import (
    ItemResult,
    TranscodeJob,
    TranscodeParams,
    UpdateField,
    UpdatePayload,
    WorkItem,
)
from audio_migrator.domain.errors import (
    ItemPipelineError,
    RecordUpdateError,
    TranscodeError,
    TransferError,
)
from audio_migrator.domain.locators import DestinationLayout, locator_to_key
from audio_migrator.domain.ports import ObjectStore, RecordStore, Transcoder

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _LocatorBranch:
    """One locator of a work item and where its migrated copy goes."""

    label: str
    locator: str
    field: UpdateField
    key_suffix: str
    file_prefix: str


class ItemPipeline:
    """Migrate one work item.

    Steps run in order and each is gated on the previous one: download the
    primary object, transcode it, upload the result, repeat for the secondary
    locator when present, then apply a single record update. The record is only
    touched when every branch succeeded, so it never ends up with a new primary
    URL next to a stale secondary one. Temporary files live in a scoped
    workspace that is removed on every exit path.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        transcoder: Transcoder,
        record_store: RecordStore,
        bucket: str,
        layout: DestinationLayout,
        transcode_params: TranscodeParams | None = None,
        content_type: str = "audio/mp4",
        workspace_root: Path | None = None,
    ) -> None:
        self._object_store = object_store
        self._transcoder = transcoder
        self._record_store = record_store
        self._bucket = bucket
        self._layout = layout
        self._transcode_params = transcode_params or TranscodeParams()
        self._content_type = content_type
        self._workspace_root = workspace_root

    async def process(self, item: WorkItem) -> ItemResult:
        """Run the pipeline; failures are logged and returned, never raised."""

        try:
            with scoped_workspace(item.item_id, root=self._workspace_root) as workspace:
                payload = await self._migrate(item, workspace)
        except ItemPipelineError as exc:
            logger.warning("[%s] Failed: %s", item.item_id, exc)
            return ItemResult(item_id=item.item_id, error=exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("[%s] Failed unexpectedly.", item.item_id)
            return ItemResult(item_id=item.item_id, error=ItemPipelineError(str(exc)))

        logger.info("[%s] Migrated.", item.item_id)
        return ItemResult(item_id=item.item_id, payload=payload)

    async def _migrate(self, item: WorkItem, workspace: Path) -> UpdatePayload:
        payload = UpdatePayload()
        for branch in self._branches(item):
            url = await self._migrate_branch(item, branch, workspace)
            payload.set(branch.field, url)

        logger.info("[%s] Updating record.", item.item_id)
        try:
            await self._record_store.update(item.item_id, payload)
        except RecordUpdateError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise RecordUpdateError(f"Record update failed: {exc}") from exc
        return payload

    def _branches(self, item: WorkItem) -> list[_LocatorBranch]:
        branches = [
            _LocatorBranch(
                label="primary",
                locator=item.primary_locator,
                field=UpdateField.PRIMARY_URL,
                key_suffix="",
                file_prefix="",
            )
        ]
        if item.secondary_locator:
            branches.append(
                _LocatorBranch(
                    label="secondary",
                    locator=item.secondary_locator,
                    field=UpdateField.SECONDARY_URL,
                    key_suffix=self._layout.secondary_suffix,
                    file_prefix="secondary_",
                )
            )
        return branches

    async def _migrate_branch(
        self,
        item: WorkItem,
        branch: _LocatorBranch,
        workspace: Path,
    ) -> str:
        """Download, transcode, and upload one locator; return the new public URL."""

        source_key = locator_to_key(branch.locator)
        input_suffix = PurePosixPath(source_key).suffix or ".bin"
        output_extension = self._layout.extension.lstrip(".")
        job = TranscodeJob(
            input_path=workspace / f"{branch.file_prefix}input{input_suffix}",
            output_path=workspace / f"{branch.file_prefix}output.{output_extension}",
            params=self._transcode_params,
        )

        logger.info("[%s] Downloading %s object %s.", item.item_id, branch.label, source_key)
        await self._download(source_key, job.input_path)

        logger.info("[%s] Transcoding %s object.", item.item_id, branch.label)
        await self._transcode(job)

        destination_key = self._layout.key_for(item.item_id, branch.key_suffix)
        logger.info("[%s] Uploading %s object to %s.", item.item_id, branch.label, destination_key)
        await self._upload(job.output_path, destination_key)
        return self._layout.public_url(destination_key)

    async def _download(self, key: str, destination: Path) -> None:
        try:
            with destination.open("wb") as handle:
                async for chunk in self._object_store.get(self._bucket, key):
                    await asyncio.to_thread(handle.write, chunk)
        except OSError as exc:
            raise TransferError(f"Could not write {destination.name}: {exc}") from exc

    async def _transcode(self, job: TranscodeJob) -> None:
        try:
            outcome = await self._transcoder.run(job)
        except TranscodeError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise TranscodeError(f"Transcoder invocation failed: {exc}") from exc
        if not outcome.succeeded:
            detail = outcome.stderr.strip().splitlines()[-1:] or ["no output"]
            raise TranscodeError(f"Transcoder exited with {outcome.returncode}: {detail[0]}")
        if not job.output_path.is_file():
            raise TranscodeError(f"Transcoder produced no output at {job.output_path.name}.")

    async def _upload(self, source: Path, key: str) -> None:
        try:
            body = await asyncio.to_thread(source.read_bytes)
        except OSError as exc:
            raise TransferError(f"Could not read {source.name}: {exc}") from exc
        await self._object_store.put(self._bucket, key, body, self._content_type)


__all__ = ["ItemPipeline"]
