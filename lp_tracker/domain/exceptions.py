from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class RecordParseError(DomainError):
    """A single feed record could not be mapped or parsed."""


class StorageError(DomainError):
    """A single record could not be written to or read from storage."""


class PositionNotFoundError(DomainError):
    """Requested position is not stored."""


class PositionEvaluationInputError(DomainError):
    """Invalid parameters for position evaluation."""
