"""Domain exceptions for migration runs."""


class MigrationError(Exception):
    """Base class for migration errors."""


class ItemPipelineError(MigrationError):
    """Raised when one work item cannot be migrated."""


class TransferError(ItemPipelineError):
    """Raised when an object cannot be fetched, decoded, or stored."""


class TranscodeError(ItemPipelineError):
    """Raised when the transcoder cannot be launched or exits non-zero."""


class RecordUpdateError(ItemPipelineError):
    """Raised when the record store rejects a partial update."""


class CandidateQueryError(MigrationError):
    """Raised when the candidate set cannot be loaded."""


__all__ = [
    "CandidateQueryError",
    "ItemPipelineError",
    "MigrationError",
    "RecordUpdateError",
    "TranscodeError",
    "TransferError",
]
