"""Canonicalisation of upstream leaderboard responses.

Two shapes are in circulation:

- legacy: a bare JSON array of entries, i.e. one unpaginated page;
- current: an object with ``entries`` (older servers: ``leaderboard``),
  ``pagination`` and ``userPosition``.

The shape is decided by the presence of a ``pagination`` key. An object
without one but carrying ``data`` is the server's response envelope and is
unwrapped once. Fields are accepted in camelCase or snake_case; anything
missing falls back to 0 / None / empty. Only a body matching neither shape
raises :class:`MalformedInputError`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from seriesboard.core.errors import MalformedInputError
from seriesboard.schemas.common import round_minutes, whole_minutes
from seriesboard.schemas.leaderboard import (
    CanonicalLeaderboardPage,
    LeaderboardEntry,
    Pagination,
)

logger = logging.getLogger(__name__)

_RAW_CONFIG = {"extra": "ignore", "coerce_numbers_to_str": True}


def _alias(*names: str):
    return Field(default=None, validation_alias=AliasChoices(*names))


# ── Raw (upstream) shapes ─────────────────────────────────────────────────────


class _RawUser(BaseModel):
    id: str | None = _alias("id", "_id")
    username: str | None = None
    full_name: str | None = _alias("fullName", "full_name")

    model_config = _RAW_CONFIG


class _RawEntry(BaseModel):
    rank: int | None = None
    user: _RawUser | str | None = None
    user_id: str | None = _alias("userId", "user_id")
    display_name: str | None = _alias("displayName", "display_name", "name")
    average_percentage: float | None = _alias("averagePercentage", "average_percentage")
    completion_percentage: float | None = _alias("completionPercentage", "completion_percentage")
    completed_quizzes: int | None = _alias("completedQuizzes", "completed_quizzes")
    total_quizzes: int | None = _alias("totalQuizzes", "total_quizzes")
    total_time_spent_minutes: float | None = _alias("totalTimeSpentMinutes", "total_time_spent_minutes")
    average_time_per_quiz: float | None = _alias("average_time_per_quiz")
    # The legacy server reported durations in seconds.
    total_time_spent_seconds: float | None = _alias("totalTimeSpent")
    average_time_per_quiz_seconds: float | None = _alias("averageTimePerQuiz")

    model_config = _RAW_CONFIG

    @field_validator(
        "average_percentage",
        "completion_percentage",
        "total_time_spent_minutes",
        "average_time_per_quiz",
        "total_time_spent_seconds",
        "average_time_per_quiz_seconds",
    )
    @classmethod
    def _finite_or_missing(cls, value: float | None) -> float | None:
        # NaN / Infinity from upstream JSON count as absent
        if value is not None and not math.isfinite(value):
            return None
        return value

    def to_entry(self) -> LeaderboardEntry:
        if isinstance(self.user, str):
            user = _RawUser(id=self.user)
        else:
            user = self.user or _RawUser()
        return LeaderboardEntry(
            rank=self.rank or 0,
            user_id=self.user_id or user.id,
            display_name=self.display_name or user.full_name or user.username,
            average_percentage=self.average_percentage or 0.0,
            completion_percentage=self.completion_percentage or 0.0,
            completed_quizzes=self.completed_quizzes or 0,
            total_quizzes=self.total_quizzes or 0,
            total_time_spent_minutes=_minutes(
                self.total_time_spent_minutes, self.total_time_spent_seconds
            ),
            average_time_per_quiz=_minutes(
                self.average_time_per_quiz, self.average_time_per_quiz_seconds
            ),
        )


class _RawPagination(BaseModel):
    current_page: int | None = _alias("currentPage", "current_page", "page")
    page_size: int | None = _alias("pageSize", "page_size", "limit")
    total_pages: int | None = _alias("totalPages", "total_pages")
    total_entries: int | None = _alias("totalEntries", "total_entries", "total")
    has_next: bool | None = _alias("hasNext", "has_next")
    has_prev: bool | None = _alias("hasPrev", "has_prev")

    model_config = _RAW_CONFIG


def _minutes(minutes: float | None, seconds: float | None) -> int:
    if minutes is not None:
        return whole_minutes(minutes)
    if seconds is not None:
        return round_minutes(seconds)
    return 0


# ── Parsing helpers ───────────────────────────────────────────────────────────


def _parse_entry(raw: Any, where: str) -> LeaderboardEntry:
    if not isinstance(raw, Mapping):
        raise MalformedInputError(
            f"{where} is not an object", details={"type": type(raw).__name__}
        )
    try:
        return _RawEntry.model_validate(raw).to_entry()
    except ValidationError as exc:
        raise MalformedInputError(
            f"{where} has invalid fields", details={"errors": exc.errors(include_url=False)}
        ) from exc


def _parse_entries(raw: Any) -> list[LeaderboardEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MalformedInputError(
            "Leaderboard entries must be a list", details={"type": type(raw).__name__}
        )
    return [_parse_entry(item, f"entries[{index}]") for index, item in enumerate(raw)]


def _parse_pagination(raw: Any, entry_count: int) -> Pagination:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise MalformedInputError(
            "pagination must be an object", details={"type": type(raw).__name__}
        )
    try:
        parsed = _RawPagination.model_validate(raw)
    except ValidationError as exc:
        raise MalformedInputError(
            "pagination has invalid fields", details={"errors": exc.errors(include_url=False)}
        ) from exc

    current_page = parsed.current_page or 1
    total_entries = parsed.total_entries if parsed.total_entries is not None else entry_count
    page_size = parsed.page_size or entry_count
    if parsed.total_pages is not None:
        total_pages = parsed.total_pages
    elif page_size > 0:
        total_pages = math.ceil(total_entries / page_size)
    else:
        # no usable page size: whatever exists is one page
        total_pages = 1 if total_entries else 0

    return Pagination(
        current_page=current_page,
        page_size=page_size,
        total_pages=total_pages,
        total_entries=total_entries,
        has_next=parsed.has_next if parsed.has_next is not None else current_page < total_pages,
        has_prev=parsed.has_prev if parsed.has_prev is not None else current_page > 1,
    )


def _from_list(raw: list) -> CanonicalLeaderboardPage:
    entries = _parse_entries(raw)
    return CanonicalLeaderboardPage(
        entries=entries,
        pagination=Pagination(
            current_page=1,
            page_size=len(entries),
            total_pages=1 if entries else 0,
            total_entries=len(entries),
            has_next=False,
            has_prev=False,
        ),
    )


def _from_paginated(raw: Mapping) -> CanonicalLeaderboardPage:
    entries = _parse_entries(raw["entries"] if "entries" in raw else raw.get("leaderboard"))
    position_raw = raw["userPosition"] if "userPosition" in raw else raw.get("user_position")
    user_position = (
        _parse_entry(position_raw, "userPosition") if position_raw is not None else None
    )
    return CanonicalLeaderboardPage(
        entries=entries,
        pagination=_parse_pagination(raw["pagination"], len(entries)),
        user_position=user_position,
    )


# ── Public API ────────────────────────────────────────────────────────────────


def normalize(raw: Any, *, _unwrapped: bool = False) -> CanonicalLeaderboardPage:
    """Turn any supported upstream leaderboard body into the canonical page."""
    if isinstance(raw, list):
        return _from_list(raw)

    if isinstance(raw, Mapping):
        if "pagination" in raw:
            return _from_paginated(raw)
        if not _unwrapped and isinstance(raw.get("data"), (list, Mapping)):
            return normalize(raw["data"], _unwrapped=True)
        logger.warning("Leaderboard body without pagination: keys=%s", sorted(map(str, raw)))
        raise MalformedInputError(
            "Leaderboard object has no pagination block",
            details={"keys": sorted(map(str, raw))},
        )

    logger.warning("Leaderboard body of unsupported type %s", type(raw).__name__)
    raise MalformedInputError(
        "Leaderboard body must be a list or an object",
        details={"type": type(raw).__name__},
    )
