"""ffmpeg subprocess transcoder."""

from __future__ import annotations

import asyncio
import logging

from audio_migrator.domain.entities import TranscodeJob, TranscodeOutcome
from audio_migrator.domain.errors import TranscodeError
from audio_migrator.domain.ports import Transcoder

logger = logging.getLogger(__name__)

_STDERR_TAIL_CHARS = 2000


class FfmpegTranscoder(Transcoder):
    """Run ffmpeg as a child process and report its exit status.

    A non-zero exit is returned as a `TranscodeOutcome`; only a failure to
    launch the binary (or a configured timeout) raises `TranscodeError`.
    """

    def __init__(
        self,
        binary: str = "ffmpeg",
        timeout_seconds: float | None = None,
    ) -> None:
        self._binary = binary
        self._timeout_seconds = timeout_seconds

    def build_command(self, job: TranscodeJob) -> list[str]:
        """Return the argv for one job."""

        params = job.params
        command = [self._binary, "-y", "-i", str(job.input_path)]
        if params.drop_non_audio_streams:
            command.append("-vn")
        command.extend(["-c:a", params.codec, "-b:a", f"{params.bitrate_kbps}k"])
        command.append(str(job.output_path))
        return command

    async def run(self, job: TranscodeJob) -> TranscodeOutcome:
        command = self.build_command(job)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise TranscodeError(f"Could not launch '{self._binary}': {exc}") from exc

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self._timeout_seconds,
            )
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            raise TranscodeError(
                f"'{self._binary}' timed out after {self._timeout_seconds}s"
            ) from exc

        returncode = process.returncode if process.returncode is not None else -1
        stderr_text = stderr.decode("utf-8", errors="replace")[-_STDERR_TAIL_CHARS:]
        if returncode != 0:
            logger.debug("'%s' exited with %d: %s", self._binary, returncode, stderr_text)
        return TranscodeOutcome(returncode=returncode, stderr=stderr_text)


__all__ = ["FfmpegTranscoder"]
