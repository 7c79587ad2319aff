"""Effective quiz set of a series.

Sections are walked in ascending ``order`` and their quizzes emitted as they
appear; legacy quizzes follow, minus any quiz already emitted. The resulting
order is canonical: progress and ranking iterate it as-is.
"""

from __future__ import annotations

import logging
import uuid
from typing import NamedTuple

from seriesboard.schemas.catalog import QuizInfo, SectionInfo, SeriesCatalog

logger = logging.getLogger(__name__)


class CatalogQuiz(NamedTuple):
    quiz: QuizInfo
    section_id: uuid.UUID | None


def ordered_sections(catalog: SeriesCatalog) -> list[SectionInfo]:
    """Sections by ``order``; equal orders keep their catalog order."""
    return sorted(catalog.sections, key=lambda section: section.order)


def deduplicate(catalog: SeriesCatalog) -> list[CatalogQuiz]:
    """Return every quiz of *catalog* exactly once, tagged with its section.

    A quiz listed in a section and again in the legacy list belongs to the
    section. A quiz listed in several sections belongs to the first one.
    """
    seen: set[uuid.UUID] = set()
    result: list[CatalogQuiz] = []

    for section in ordered_sections(catalog):
        for quiz in section.quizzes:
            if quiz.id in seen:
                continue
            seen.add(quiz.id)
            result.append(CatalogQuiz(quiz, section.id))

    dropped = 0
    for quiz in catalog.legacy_quizzes:
        if quiz.id in seen:
            dropped += 1
            continue
        seen.add(quiz.id)
        result.append(CatalogQuiz(quiz, None))

    logger.debug(
        "Series %s: %d unique quizzes (%d legacy duplicates dropped)",
        catalog.id, len(result), dropped,
    )
    return result


def quiz_ids(catalog: SeriesCatalog) -> list[uuid.UUID]:
    """Canonical quiz id list for *catalog*."""
    return [entry.quiz.id for entry in deduplicate(catalog)]
