"""Progress schemas: raw snapshots for the engine, rounded views for callers."""

import enum
import uuid

from pydantic import BaseModel

from seriesboard.schemas.attempt import AttemptRead, AttemptRecord
from seriesboard.schemas.catalog import QuizInfo
from seriesboard.schemas.common import round_minutes, round_percent


class QuizStatus(str, enum.Enum):
    NOT_ATTEMPTED = "not-attempted"
    PASSED = "passed"
    FAILED = "failed"


class ProgressSnapshot(BaseModel):
    """Unrounded completion and score totals for one user over a quiz set.

    Sums cover completed best attempts only. Quizzes whose best attempt has no
    positive ``max_score`` are counted as completed but stay out of both
    ``score_sum`` and ``max_score_sum``.
    """

    completed_count: int = 0
    total_count: int = 0
    passed_count: int = 0
    score_sum: float = 0.0
    max_score_sum: float = 0.0
    time_spent_seconds: int = 0

    model_config = {"frozen": True}

    @property
    def average_score_percent(self) -> float:
        if self.max_score_sum <= 0:
            return 0.0
        return self.score_sum / self.max_score_sum * 100

    @property
    def completion_percent(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return self.completed_count / self.total_count * 100

    @property
    def total_time_spent_minutes(self) -> float:
        return self.time_spent_seconds / 60


class QuizResult(BaseModel):
    """A deduplicated quiz together with the user's best attempt on it."""

    quiz: QuizInfo
    section_id: uuid.UUID | None = None
    best_attempt: AttemptRecord | None = None
    status: QuizStatus = QuizStatus.NOT_ATTEMPTED


class SeriesProgress(BaseModel):
    """Output of ``compute_progress``: overall, per-section and per-quiz."""

    overall: ProgressSnapshot
    per_section: dict[uuid.UUID, ProgressSnapshot] = {}
    quizzes: list[QuizResult] = []


# ── Caller-facing (rounded) views ────────────────────────────────────────────


class ProgressSnapshotRead(BaseModel):
    completed_count: int
    total_count: int
    passed_count: int
    average_score_percent: float
    completion_percent: float
    total_time_spent_minutes: int

    @classmethod
    def from_snapshot(cls, snapshot: ProgressSnapshot) -> "ProgressSnapshotRead":
        return cls(
            completed_count=snapshot.completed_count,
            total_count=snapshot.total_count,
            passed_count=snapshot.passed_count,
            average_score_percent=round_percent(snapshot.average_score_percent),
            completion_percent=round_percent(snapshot.completion_percent),
            total_time_spent_minutes=round_minutes(snapshot.time_spent_seconds),
        )


class SectionProgressRead(BaseModel):
    section_id: uuid.UUID
    title: str
    order: int
    progress: ProgressSnapshotRead


class QuizResultRead(BaseModel):
    quiz_id: uuid.UUID
    title: str
    time_limit: int
    question_count: int
    section_id: uuid.UUID | None = None
    status: QuizStatus
    best_attempt: AttemptRead | None = None

    @classmethod
    def from_result(cls, result: QuizResult) -> "QuizResultRead":
        return cls(
            quiz_id=result.quiz.id,
            title=result.quiz.title,
            time_limit=result.quiz.time_limit,
            question_count=result.quiz.question_count,
            section_id=result.section_id,
            status=result.status,
            best_attempt=(
                AttemptRead.from_record(result.best_attempt)
                if result.best_attempt
                else None
            ),
        )


class SeriesProgressRead(BaseModel):
    """Progress panel payload for one user in one series."""

    series_id: uuid.UUID
    user_id: uuid.UUID
    overall: ProgressSnapshotRead
    sections: list[SectionProgressRead] = []
    quizzes: list[QuizResultRead] = []
