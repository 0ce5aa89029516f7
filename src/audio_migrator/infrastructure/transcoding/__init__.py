"""Transcoder adapters."""

from audio_migrator.infrastructure.transcoding.ffmpeg_transcoder import FfmpegTranscoder

__all__ = ["FfmpegTranscoder"]
