"""Per-user progress over a series and its sections.

Only completed best attempts contribute. The average score is pooled,
``sum(score) / sum(max_score)``, so a 2-point quiz weighs less than a
50-point one. Every ratio with an empty denominator is 0.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from seriesboard.schemas.attempt import AttemptRecord
from seriesboard.schemas.catalog import SeriesCatalog
from seriesboard.schemas.progress import ProgressSnapshot, QuizResult, SeriesProgress
from seriesboard.services.best_attempt import select_best_attempt, status_of
from seriesboard.services.dedup import deduplicate, ordered_sections

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    total: int = 0
    completed: int = 0
    passed: int = 0
    score: float = 0.0
    max_score: float = 0.0
    seconds: int = 0

    def add(self, best: AttemptRecord | None) -> None:
        self.total += 1
        if best is None:
            return
        self.completed += 1
        if best.is_passed:
            self.passed += 1
        self.seconds += best.time_spent_seconds
        # Zero-max quizzes count as completed but cannot take part in the ratio.
        if best.max_score > 0:
            self.score += best.score
            self.max_score += best.max_score

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            completed_count=self.completed,
            total_count=self.total,
            passed_count=self.passed,
            score_sum=self.score,
            max_score_sum=self.max_score,
            time_spent_seconds=self.seconds,
        )


def compute_progress(
    catalog: SeriesCatalog,
    attempts_by_quiz: Mapping[uuid.UUID, Sequence[AttemptRecord]],
) -> SeriesProgress:
    """Aggregate one user's attempts over *catalog*.

    *attempts_by_quiz* holds that user's attempts keyed by quiz id; quizzes
    without a key simply have no attempts. Every catalog section gets a
    snapshot, empty sections included.
    """
    overall = _Tally()
    sections: dict[uuid.UUID, _Tally] = {
        section.id: _Tally() for section in ordered_sections(catalog)
    }
    results: list[QuizResult] = []

    for quiz, section_id in deduplicate(catalog):
        best = select_best_attempt(attempts_by_quiz.get(quiz.id, ()))
        overall.add(best)
        if section_id is not None:
            sections[section_id].add(best)
        results.append(
            QuizResult(
                quiz=quiz,
                section_id=section_id,
                best_attempt=best,
                status=status_of(best),
            )
        )

    logger.debug(
        "Series %s progress: %d/%d completed, %d passed",
        catalog.id, overall.completed, overall.total, overall.passed,
    )
    return SeriesProgress(
        overall=overall.snapshot(),
        per_section={section_id: tally.snapshot() for section_id, tally in sections.items()},
        quizzes=results,
    )
