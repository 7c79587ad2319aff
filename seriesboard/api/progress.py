"""Progress routes."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from seriesboard.api.deps import get_series_catalog
from seriesboard.db.session import get_db
from seriesboard.schemas.catalog import SeriesCatalog
from seriesboard.schemas.progress import (
    ProgressSnapshot,
    ProgressSnapshotRead,
    QuizResultRead,
    SectionProgressRead,
    SeriesProgressRead,
)
from seriesboard.services.collector import AttemptCollector
from seriesboard.services.dedup import ordered_sections, quiz_ids
from seriesboard.services.progress import compute_progress
from seriesboard.services.stores import SqlAttemptStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{series_id}/progress", response_model=SeriesProgressRead)
def get_progress(
    series_id: uuid.UUID,
    user_id: uuid.UUID = Query(..., description="User whose progress to compute"),
    catalog: SeriesCatalog = Depends(get_series_catalog),
    db: Session = Depends(get_db),
):
    """Overall, per‑section and per‑quiz progress of one user in a series."""
    ids = quiz_ids(catalog)
    store = SqlAttemptStore(db, ids, user_ids=[user_id])
    with AttemptCollector(store.list_attempts) as collector:
        progress = compute_progress(catalog, collector.collect(user_id, ids))

    sections = [
        SectionProgressRead(
            section_id=section.id,
            title=section.title,
            order=section.order,
            progress=ProgressSnapshotRead.from_snapshot(
                progress.per_section.get(section.id, ProgressSnapshot())
            ),
        )
        for section in ordered_sections(catalog)
    ]
    logger.info(
        "Progress for user %s in series %s: %d/%d completed",
        user_id, series_id,
        progress.overall.completed_count, progress.overall.total_count,
    )
    return SeriesProgressRead(
        series_id=series_id,
        user_id=user_id,
        overall=ProgressSnapshotRead.from_snapshot(progress.overall),
        sections=sections,
        quizzes=[QuizResultRead.from_result(result) for result in progress.quizzes],
    )
