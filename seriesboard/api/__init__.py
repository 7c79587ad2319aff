"""API route package — imports all routers for main.py."""

from seriesboard.api.health import router as health_router  # noqa: F401
from seriesboard.api.progress import router as progress_router  # noqa: F401
from seriesboard.api.leaderboard import router as leaderboard_router  # noqa: F401
from seriesboard.api.normalize import router as normalize_router  # noqa: F401
