"""Domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from audio_migrator.domain.errors import ItemPipelineError


@dataclass(slots=True, frozen=True)
class WorkItem:
    """One record selected for migration."""

    item_id: str
    primary_locator: str
    secondary_locator: str | None = None

    def __post_init__(self) -> None:
        if not self.item_id:
            raise ValueError("WorkItem requires a non-empty item_id.")
        if not self.primary_locator:
            raise ValueError(f"WorkItem '{self.item_id}' requires a primary locator.")


@dataclass(slots=True, frozen=True)
class CandidateFilter:
    """Selection criteria for the candidate set.

    A record matches when its primary or secondary locator ends with
    `extension` and, if `language_tag` is set, its language tags contain it.
    """

    extension: str = ".mp3"
    language_tag: str | None = None


@dataclass(slots=True, frozen=True)
class TranscodeParams:
    """Target encoding parameters."""

    drop_non_audio_streams: bool = True
    codec: str = "aac"
    bitrate_kbps: int = 128


@dataclass(slots=True, frozen=True)
class TranscodeJob:
    """Input/output pair for one transcoder invocation."""

    input_path: Path
    output_path: Path
    params: TranscodeParams = field(default_factory=TranscodeParams)


@dataclass(slots=True, frozen=True)
class TranscodeOutcome:
    """Exit status of one transcoder process."""

    returncode: int
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class UpdateField(StrEnum):
    """Record fields rewritten by a successful migration."""

    PRIMARY_URL = "primary_url"
    SECONDARY_URL = "secondary_url"


@dataclass(slots=True)
class UpdatePayload:
    """Partial record update accumulated while one item is processed."""

    fields: dict[UpdateField, str] = field(default_factory=dict)

    def set(self, name: UpdateField, value: str) -> None:
        self.fields[name] = value

    def as_dict(self) -> dict[str, str]:
        return {str(name): value for name, value in self.fields.items()}

    def __bool__(self) -> bool:
        return bool(self.fields)


@dataclass(slots=True, frozen=True)
class ItemResult:
    """Outcome of one pipeline invocation."""

    item_id: str
    error: ItemPipelineError | None = None
    payload: UpdatePayload | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


__all__ = [
    "CandidateFilter",
    "ItemResult",
    "TranscodeJob",
    "TranscodeOutcome",
    "TranscodeParams",
    "UpdateField",
    "UpdatePayload",
    "WorkItem",
]
