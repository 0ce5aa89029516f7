"""Hand-written collaborators shared by pipeline and batch tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from audio_migrator.domain.entities import TranscodeJob, TranscodeOutcome
from audio_migrator.domain.errors import TransferError


class FakeObjectStore:
    """In-memory object store recording every call."""

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects = dict(objects or {})
        self.get_calls: list[tuple[str, str]] = []
        self.put_calls: list[tuple[str, str, bytes, str]] = []
        self.fail_put_keys: set[str] = set()

    async def get(self, bucket: str, key: str) -> AsyncIterator[bytes]:
        self.get_calls.append((bucket, key))
        if key not in self.objects:
            raise TransferError(f"NoSuchKey: {key}")
        payload = self.objects[key]
        for index in range(0, len(payload), 4):
            await asyncio.sleep(0)
            yield payload[index : index + 4]

    async def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        if key in self.fail_put_keys:
            raise TransferError(f"PUT {key} refused")
        self.put_calls.append((bucket, key, body, content_type))
        self.objects[key] = body


class FakeTranscoder:
    """Transcoder writing `aac:` + input bytes to the output path."""

    def __init__(
        self,
        returncode: int = 0,
        raise_on_run: Exception | None = None,
        fail_inputs_with_prefix: str | None = None,
    ) -> None:
        self.returncode = returncode
        self.raise_on_run = raise_on_run
        self.fail_inputs_with_prefix = fail_inputs_with_prefix
        self.jobs: list[TranscodeJob] = []

    async def run(self, job: TranscodeJob) -> TranscodeOutcome:
        self.jobs.append(job)
        if self.raise_on_run is not None:
            raise self.raise_on_run
        if self.fail_inputs_with_prefix and job.input_path.name.startswith(
            self.fail_inputs_with_prefix
        ):
            return TranscodeOutcome(returncode=1, stderr="Invalid data found when processing input")
        if self.returncode != 0:
            return TranscodeOutcome(returncode=self.returncode, stderr="encoder error")
        job.output_path.write_bytes(b"aac:" + job.input_path.read_bytes())
        return TranscodeOutcome(returncode=0)


def record(item_id: str, primary: str, secondary: str | None = None) -> dict[str, object]:
    return {
        "id": item_id,
        "audio_file": primary,
        "audioFile_dubbing": secondary,
        "language": ["de"],
        "title": f"Episode {item_id}",
    }
