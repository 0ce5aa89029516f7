"""Application settings."""

import logging
from enum import StrEnum
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordStoreBackend(StrEnum):
    """Available persistence adapters for migrated records."""

    POSTGREST = "postgrest"
    POSTGRES = "postgres"


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables or `.env`."""

    s3_endpoint_url: str | None = None
    s3_access_key_id: str | None = None
    s3_secret_access_key: str | None = None
    s3_region: str = "auto"
    s3_bucket: str = ""
    s3_max_pool_connections: int = 16
    s3_connect_timeout_seconds: float | None = None
    s3_read_timeout_seconds: float | None = None
    public_base_url: str = ""
    record_store_backend: RecordStoreBackend = RecordStoreBackend.POSTGREST
    postgrest_url: str | None = None
    postgrest_api_key: str | None = None
    postgrest_timeout_seconds: float = 30.0
    postgres_dsn: str | None = None
    postgres_pool_min_size: int = 1
    postgres_pool_max_size: int = 10
    record_table: str = "episodes"
    record_id_column: str = "id"
    primary_locator_column: str = "audio_file"
    secondary_locator_column: str = "audioFile_dubbing"
    language_column: str = "language"
    source_extension: str = ".mp3"
    target_language: str | None = "de"
    destination_namespace: str = "de-episodes-audio"
    destination_format_subpath: str = "m4a"
    output_extension: str = "m4a"
    output_content_type: str = "audio/mp4"
    secondary_key_suffix: str = "_dubbing"
    transcoder_binary: str = "ffmpeg"
    audio_codec: str = "aac"
    audio_bitrate_kbps: int = 128
    transcode_timeout_seconds: float | None = None
    worker_concurrency: int = 5
    workspace_root: Path | None = None
    log_level: str = "INFO"

    @field_validator("target_language", "s3_endpoint_url", "workspace_root", mode="before")
    @classmethod
    def blank_as_none(cls, value: object) -> object:
        """Treat empty env var values as unset."""

        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{value}'.")
        return level

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Ensure required and backend-specific settings are valid."""

        if not self.s3_bucket:
            raise ValueError("AUDIO_MIGRATOR_S3_BUCKET is required.")
        if not self.public_base_url:
            raise ValueError("AUDIO_MIGRATOR_PUBLIC_BASE_URL is required.")
        if self.record_store_backend == RecordStoreBackend.POSTGREST and (
            not self.postgrest_url or not self.postgrest_api_key
        ):
            raise ValueError(
                "AUDIO_MIGRATOR_POSTGREST_URL and AUDIO_MIGRATOR_POSTGREST_API_KEY are required "
                "when AUDIO_MIGRATOR_RECORD_STORE_BACKEND=postgrest."
            )
        if self.record_store_backend == RecordStoreBackend.POSTGRES and not self.postgres_dsn:
            raise ValueError(
                "AUDIO_MIGRATOR_POSTGRES_DSN is required when "
                "AUDIO_MIGRATOR_RECORD_STORE_BACKEND=postgres."
            )
        if self.postgres_pool_min_size < 1:
            raise ValueError("AUDIO_MIGRATOR_POSTGRES_POOL_MIN_SIZE must be >= 1.")
        if self.postgres_pool_max_size < self.postgres_pool_min_size:
            raise ValueError(
                "AUDIO_MIGRATOR_POSTGRES_POOL_MAX_SIZE must be >= "
                "AUDIO_MIGRATOR_POSTGRES_POOL_MIN_SIZE."
            )
        if self.postgrest_timeout_seconds <= 0:
            raise ValueError("AUDIO_MIGRATOR_POSTGREST_TIMEOUT_SECONDS must be > 0.")
        if not self.source_extension.startswith("."):
            raise ValueError("AUDIO_MIGRATOR_SOURCE_EXTENSION must start with '.'.")
        if self.worker_concurrency < 1:
            raise ValueError("AUDIO_MIGRATOR_WORKER_CONCURRENCY must be >= 1.")
        if self.audio_bitrate_kbps < 1:
            raise ValueError("AUDIO_MIGRATOR_AUDIO_BITRATE_KBPS must be >= 1.")
        if self.s3_max_pool_connections < self.worker_concurrency:
            raise ValueError(
                "AUDIO_MIGRATOR_S3_MAX_POOL_CONNECTIONS must be >= "
                "AUDIO_MIGRATOR_WORKER_CONCURRENCY."
            )
        for name in (
            "s3_connect_timeout_seconds",
            "s3_read_timeout_seconds",
            "transcode_timeout_seconds",
        ):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"AUDIO_MIGRATOR_{name.upper()} must be > 0.")
        return self

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_MIGRATOR_",
        env_file=".env",
        extra="ignore",
    )


__all__ = ["RecordStoreBackend", "Settings"]
