"""Attempt schemas."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, field_validator, model_validator

from seriesboard.schemas.common import round_minutes, round_percent


class AttemptRecord(BaseModel):
    """One stored attempt, as read from the attempt store.

    ``percentage`` may arrive precomputed. When ``max_score`` is positive it is
    re-derived from ``score / max_score`` and the supplied value is discarded.
    """

    id: uuid.UUID | None = None
    quiz_id: uuid.UUID
    user_id: uuid.UUID
    score: float = 0.0
    max_score: float = 0.0
    percentage: float = 0.0
    is_completed: bool = False
    is_passed: bool = False
    time_spent_seconds: int = 0
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("score", "max_score", "percentage", "time_spent_seconds", mode="before")
    @classmethod
    def _none_as_zero(cls, value):
        return 0 if value is None else value

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive timestamps; they were written as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _derive_percentage(self) -> "AttemptRecord":
        if self.max_score > 0:
            self.percentage = self.score / self.max_score * 100
        return self


class AttemptRead(BaseModel):
    """Best-attempt summary returned to callers."""

    id: uuid.UUID | None = None
    score: float
    max_score: float
    percentage: float
    is_passed: bool
    time_spent_minutes: int
    completed_at: datetime

    @classmethod
    def from_record(cls, record: AttemptRecord) -> "AttemptRead":
        return cls(
            id=record.id,
            score=record.score,
            max_score=record.max_score,
            percentage=round_percent(record.percentage),
            is_passed=record.is_passed,
            time_spent_minutes=round_minutes(record.time_spent_seconds),
            completed_at=record.created_at,
        )
