"""FastAPI dependencies shared across routes."""

import uuid

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from seriesboard.db.session import get_db
from seriesboard.schemas.catalog import SeriesCatalog
from seriesboard.services.stores import SqlQuizCatalog


def get_quiz_catalog(db: Session = Depends(get_db)) -> SqlQuizCatalog:
    return SqlQuizCatalog(db)


def get_series_catalog(
    series_id: uuid.UUID,
    quiz_catalog: SqlQuizCatalog = Depends(get_quiz_catalog),
) -> SeriesCatalog:
    """Load the series named in the path, or 404."""
    catalog = quiz_catalog.load_catalog(series_id)
    if catalog is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Test series not found"
        )
    return catalog
