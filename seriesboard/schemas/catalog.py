"""Catalog schemas: the series, section and quiz shapes the engine consumes."""

import uuid

from pydantic import BaseModel


class QuizInfo(BaseModel):
    """Quiz metadata as exposed by the catalog. Never modified here."""

    id: uuid.UUID
    title: str = ""
    time_limit: int = 0  # minutes
    question_count: int = 0
    section_id: uuid.UUID | None = None

    model_config = {"frozen": True}


class SectionInfo(BaseModel):
    """An ordered sub-grouping of quizzes within a series."""

    id: uuid.UUID
    title: str = ""
    description: str | None = None
    order: int = 0
    quizzes: list[QuizInfo] = []


class SeriesCatalog(BaseModel):
    """A series: ordered sections plus legacy quizzes outside any section.

    The same quiz may be listed both in a section and in ``legacy_quizzes``;
    consumers go through :func:`seriesboard.services.dedup.deduplicate` to get
    the effective quiz set.
    """

    id: uuid.UUID
    title: str = ""
    sections: list[SectionInfo] = []
    legacy_quizzes: list[QuizInfo] = []
