"""Application bootstrap/wiring."""

from audio_migrator.application.services import ItemPipeline, MigrationBatchService
from audio_migrator.config import RecordStoreBackend, Settings
from audio_migrator.domain.entities import CandidateFilter, TranscodeParams
from audio_migrator.domain.locators import DestinationLayout
from audio_migrator.domain.ports import RecordStore
from audio_migrator.infrastructure.records import (
    PostgresRecordStore,
    PostgrestRecordStore,
    RecordSchema,
)
from audio_migrator.infrastructure.storage import S3ObjectStore
from audio_migrator.infrastructure.transcoding import FfmpegTranscoder


def _build_record_schema(settings: Settings) -> RecordSchema:
    return RecordSchema(
        table=settings.record_table,
        id_column=settings.record_id_column,
        primary_locator_column=settings.primary_locator_column,
        secondary_locator_column=settings.secondary_locator_column,
        language_column=settings.language_column,
    )


def _build_record_store(settings: Settings) -> RecordStore:
    schema = _build_record_schema(settings)
    if settings.record_store_backend == RecordStoreBackend.POSTGRES:
        if settings.postgres_dsn is None:
            raise ValueError(
                "AUDIO_MIGRATOR_POSTGRES_DSN is required when "
                "AUDIO_MIGRATOR_RECORD_STORE_BACKEND=postgres."
            )
        return PostgresRecordStore(
            dsn=settings.postgres_dsn,
            schema=schema,
            min_pool_size=settings.postgres_pool_min_size,
            max_pool_size=settings.postgres_pool_max_size,
        )

    if settings.postgrest_url is None or settings.postgrest_api_key is None:
        raise ValueError(
            "AUDIO_MIGRATOR_POSTGREST_URL and AUDIO_MIGRATOR_POSTGREST_API_KEY are required "
            "when AUDIO_MIGRATOR_RECORD_STORE_BACKEND=postgrest."
        )
    return PostgrestRecordStore(
        base_url=settings.postgrest_url,
        api_key=settings.postgrest_api_key,
        schema=schema,
        timeout_seconds=settings.postgrest_timeout_seconds,
    )


def _build_object_store(settings: Settings) -> S3ObjectStore:
    return S3ObjectStore(
        endpoint_url=settings.s3_endpoint_url,
        region=settings.s3_region,
        access_key_id=settings.s3_access_key_id,
        secret_access_key=settings.s3_secret_access_key,
        max_pool_connections=settings.s3_max_pool_connections,
        connect_timeout_seconds=settings.s3_connect_timeout_seconds,
        read_timeout_seconds=settings.s3_read_timeout_seconds,
    )


def build_destination_layout(settings: Settings) -> DestinationLayout:
    return DestinationLayout(
        namespace=settings.destination_namespace,
        format_subpath=settings.destination_format_subpath,
        extension=settings.output_extension,
        public_base_url=settings.public_base_url,
        secondary_suffix=settings.secondary_key_suffix,
    )


def build_migration_service(settings: Settings) -> MigrationBatchService:
    """Compose service graph."""

    record_store = _build_record_store(settings)
    pipeline = ItemPipeline(
        object_store=_build_object_store(settings),
        transcoder=FfmpegTranscoder(
            binary=settings.transcoder_binary,
            timeout_seconds=settings.transcode_timeout_seconds,
        ),
        record_store=record_store,
        bucket=settings.s3_bucket,
        layout=build_destination_layout(settings),
        transcode_params=TranscodeParams(
            drop_non_audio_streams=True,
            codec=settings.audio_codec,
            bitrate_kbps=settings.audio_bitrate_kbps,
        ),
        content_type=settings.output_content_type,
        workspace_root=settings.workspace_root,
    )
    return MigrationBatchService(
        record_store=record_store,
        pipeline=pipeline,
        candidate_filter=CandidateFilter(
            extension=settings.source_extension,
            language_tag=settings.target_language,
        ),
        concurrency=settings.worker_concurrency,
    )


__all__ = ["build_destination_layout", "build_migration_service"]
