"""Leaderboard schemas."""

import enum
import uuid

from pydantic import BaseModel, Field

from seriesboard.schemas.progress import QuizResultRead


class LeaderboardView(str, enum.Enum):
    COMPACT = "compact"
    EXPANDED = "expanded"


class LeaderboardEntry(BaseModel):
    """One ranked user. Percentages have one decimal, durations are minutes."""

    rank: int = 0
    user_id: str | None = None
    display_name: str | None = None
    average_percentage: float = 0.0
    completion_percentage: float = 0.0
    completed_quizzes: int = 0
    total_quizzes: int = 0
    total_time_spent_minutes: int = 0
    average_time_per_quiz: int = 0


class Pagination(BaseModel):
    current_page: int = 1
    page_size: int = 0
    total_pages: int = 0
    total_entries: int = 0
    has_next: bool = False
    has_prev: bool = False


class LeaderboardPage(BaseModel):
    """A page of ranked entries.

    ``user_position`` carries the requesting user's entry when it falls
    outside ``entries``.
    """

    entries: list[LeaderboardEntry] = []
    pagination: Pagination = Field(default_factory=Pagination)
    user_position: LeaderboardEntry | None = None


# Normalised upstream pages share the exact shape of locally ranked ones.
CanonicalLeaderboardPage = LeaderboardPage


class UserPerformanceRead(BaseModel):
    """A single user's standing plus the best attempt behind every quiz."""

    series_id: uuid.UUID
    entry: LeaderboardEntry
    quizzes: list[QuizResultRead] = []
