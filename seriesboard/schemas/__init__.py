"""Pydantic schemas — re‑exported for convenience."""

from seriesboard.schemas.common import ErrorResponse  # noqa: F401
from seriesboard.schemas.catalog import (  # noqa: F401
    QuizInfo,
    SectionInfo,
    SeriesCatalog,
)
from seriesboard.schemas.attempt import (  # noqa: F401
    AttemptRead,
    AttemptRecord,
)
from seriesboard.schemas.progress import (  # noqa: F401
    ProgressSnapshot,
    ProgressSnapshotRead,
    QuizResult,
    QuizResultRead,
    QuizStatus,
    SectionProgressRead,
    SeriesProgress,
    SeriesProgressRead,
)
from seriesboard.schemas.leaderboard import (  # noqa: F401
    CanonicalLeaderboardPage,
    LeaderboardEntry,
    LeaderboardPage,
    LeaderboardView,
    Pagination,
    UserPerformanceRead,
)
