"""Exceptions surfaced by the aggregation engine."""

from typing import Any


class SeriesboardError(Exception):
    """Base class for errors the HTTP layer reports to callers."""

    error_code = "seriesboard_error"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class MalformedInputError(SeriesboardError):
    """A raw upstream leaderboard body matches no known response shape."""

    error_code = "malformed_input"
    status_code = 422
