"""Infrastructure layer public API."""

from audio_migrator.infrastructure.records import (
    InMemoryRecordStore,
    PostgresRecordStore,
    PostgrestRecordStore,
    RecordSchema,
)
from audio_migrator.infrastructure.storage import S3ObjectStore
from audio_migrator.infrastructure.transcoding import FfmpegTranscoder

__all__ = [
    "FfmpegTranscoder",
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "PostgrestRecordStore",
    "RecordSchema",
    "S3ObjectStore",
]
