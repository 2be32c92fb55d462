"""Exceptions raised at the boundaries of the analytics engine.

Scoring, aggregation and rollups never raise for bad input; these errors are
reserved for startup (lexicon loading) and for callers handing in invalid
periods or records.
"""


class ChatpulseError(Exception):
    """Base class for chatpulse errors."""


class LexiconLoadError(ChatpulseError):
    """A lexicon file could not be parsed."""

    def __init__(self, path, line_number: int, reason: str):
        self.path = path
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{path}:{line_number}: {reason}")


class InvalidPeriodError(ChatpulseError, ValueError):
    """An analytics period whose start lies after its end."""


class InvalidRecordError(ChatpulseError, ValueError):
    """An upstream record that cannot be mapped to a domain model."""
