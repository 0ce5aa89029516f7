"""Command-line entrypoint."""

import asyncio
import logging
import sys

from pydantic import ValidationError

from audio_migrator import __version__
from audio_migrator.bootstrap import build_migration_service
from audio_migrator.config import Settings
from audio_migrator.domain.errors import CandidateQueryError
from audio_migrator.domain.progress import BatchCounters

EXIT_OK = 0
EXIT_QUERY_FAILED = 1
EXIT_ITEMS_FAILED = 2
EXIT_BAD_SETTINGS = 3

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def exit_code_for(counters: BatchCounters) -> int:
    return EXIT_ITEMS_FAILED if counters.failed else EXIT_OK


def main() -> int:
    """Load settings, run one batch, and map the outcome to an exit status."""

    try:
        settings = Settings()
    except ValidationError as exc:
        configure_logging("INFO")
        logger.error("Invalid settings: %s", exc)
        return EXIT_BAD_SETTINGS

    configure_logging(settings.log_level)
    logger.info("audio-migrator %s", __version__)
    service = build_migration_service(settings)
    try:
        counters = asyncio.run(service.run())
    except CandidateQueryError as exc:
        logger.error("Aborting run: %s", exc)
        return EXIT_QUERY_FAILED
    return exit_code_for(counters)


def run() -> None:
    """Console script entrypoint."""

    sys.exit(main())


__all__ = ["main", "run"]
