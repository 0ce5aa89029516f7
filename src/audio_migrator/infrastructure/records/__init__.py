"""Record store implementations."""

from audio_migrator.infrastructure.records.in_memory_record_store import InMemoryRecordStore
from audio_migrator.infrastructure.records.postgres_record_store import PostgresRecordStore
from audio_migrator.infrastructure.records.postgrest_record_store import PostgrestRecordStore
from audio_migrator.infrastructure.records.record_schema import RecordSchema

__all__ = [
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "PostgrestRecordStore",
    "RecordSchema",
]
