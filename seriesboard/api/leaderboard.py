"""Test-series leaderboard routes."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from seriesboard.api.deps import get_quiz_catalog, get_series_catalog
from seriesboard.config import settings
from seriesboard.db.session import get_db
from seriesboard.schemas.catalog import SeriesCatalog
from seriesboard.schemas.leaderboard import (
    LeaderboardPage,
    LeaderboardView,
    UserPerformanceRead,
)
from seriesboard.schemas.progress import QuizResultRead
from seriesboard.services.collector import AttemptCollector
from seriesboard.services.dedup import quiz_ids
from seriesboard.services.leaderboard import (
    Participant,
    compute_standings,
    locate,
    rank_all,
    rank_series,
)
from seriesboard.services.stores import SqlAttemptStore, SqlQuizCatalog

logger = logging.getLogger(__name__)
router = APIRouter()


def _page_size_for(view: LeaderboardView) -> int:
    if view == LeaderboardView.COMPACT:
        return settings.LEADERBOARD_COMPACT_PAGE_SIZE
    return settings.LEADERBOARD_EXPANDED_PAGE_SIZE


@router.get("/{series_id}/leaderboard", response_model=LeaderboardPage)
def get_leaderboard(
    series_id: uuid.UUID,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=settings.LEADERBOARD_MAX_PAGE_SIZE),
    view: LeaderboardView = Query(LeaderboardView.EXPANDED),
    user_id: uuid.UUID | None = Query(None, description="Requesting user, for 'your rank'"),
    catalog: SeriesCatalog = Depends(get_series_catalog),
    quiz_catalog: SqlQuizCatalog = Depends(get_quiz_catalog),
    db: Session = Depends(get_db),
):
    """Rank every enrolled user of a series and return one page.

    When ``user_id`` ranks outside the page, their entry comes back in
    ``user_position``.
    """
    size = page_size or _page_size_for(view)
    participants = quiz_catalog.list_participants(series_id)
    ids = quiz_ids(catalog)
    store = SqlAttemptStore(db, ids, user_ids=[p.user_id for p in participants])

    with AttemptCollector(store.list_attempts) as collector:
        result = rank_series(
            catalog,
            participants,
            lambda uid: collector.collect(uid, ids),
            page=page,
            page_size=size,
            requesting_user_id=user_id,
        )

    logger.info(
        "Leaderboard for series %s: %d entries, page %d/%d",
        series_id, result.pagination.total_entries, page, result.pagination.total_pages,
    )
    return result


@router.get("/{series_id}/leaderboard/users/{user_id}", response_model=UserPerformanceRead)
def get_user_performance(
    series_id: uuid.UUID,
    user_id: uuid.UUID,
    catalog: SeriesCatalog = Depends(get_series_catalog),
    quiz_catalog: SqlQuizCatalog = Depends(get_quiz_catalog),
    db: Session = Depends(get_db),
):
    """One enrolled user's rank together with their best attempt per quiz."""
    if quiz_catalog.get_participant(series_id, user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User is not enrolled in this test series",
        )

    participants: list[Participant] = quiz_catalog.list_participants(series_id)
    ids = quiz_ids(catalog)
    store = SqlAttemptStore(db, ids, user_ids=[p.user_id for p in participants])

    with AttemptCollector(store.list_attempts) as collector:
        standings = compute_standings(
            catalog, participants, lambda uid: collector.collect(uid, ids)
        )

    ranked = rank_all(
        {uid: progress.overall for uid, progress in standings.items()},
        display_names={p.user_id: p.display_name for p in participants},
    )
    return UserPerformanceRead(
        series_id=series_id,
        entry=locate(ranked, user_id),
        quizzes=[QuizResultRead.from_result(r) for r in standings[user_id].quizzes],
    )
