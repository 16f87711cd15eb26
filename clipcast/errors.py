"""
Error taxonomy for the scheduling core.

Every error raised by ClipCast carries an ErrorKind and a context dict so
callers can branch on the kind instead of parsing messages.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of scheduling errors."""

    EXHAUSTED = "exhausted"  # Sampler ran out of fetch budget or corpus
    STATS_NOT_FOUND = "stats_not_found"  # Corpus has never been populated
    NOT_FOUND = "not_found"  # Document or timeline item missing
    IO = "io"  # Store failure


class ClipCastError(Exception):
    """Base class for all ClipCast errors."""

    kind: ErrorKind = ErrorKind.IO

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class ExhaustedError(ClipCastError):
    """The sampler could not assemble enough unique records."""

    kind = ErrorKind.EXHAUSTED


class StatsNotFoundError(ClipCastError):
    """No CorpusStats document exists yet."""

    kind = ErrorKind.STATS_NOT_FOUND


class NotFoundError(ClipCastError):
    """A document or timeline entry does not exist."""

    kind = ErrorKind.NOT_FOUND


class StoreIOError(ClipCastError):
    """The backing store failed to read or write."""

    kind = ErrorKind.IO
