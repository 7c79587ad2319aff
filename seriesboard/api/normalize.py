"""Upstream leaderboard normalisation route."""

from typing import Any

from fastapi import APIRouter, Body

from seriesboard.schemas.leaderboard import CanonicalLeaderboardPage
from seriesboard.services.normalizer import normalize

router = APIRouter()


@router.post("/normalize", response_model=CanonicalLeaderboardPage)
def normalize_leaderboard(raw: Any = Body(...)):
    """Accept either upstream response shape and return the canonical page.

    Malformed bodies surface as 422 through the ``SeriesboardError`` handler.
    """
    return normalize(raw)
