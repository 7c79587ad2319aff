"""Selection of the attempt that represents a user on one quiz."""

from collections.abc import Iterable

from seriesboard.schemas.attempt import AttemptRecord
from seriesboard.schemas.progress import QuizStatus


def select_best_attempt(attempts: Iterable[AttemptRecord]) -> AttemptRecord | None:
    """Highest-percentage completed attempt, latest first on ties.

    In-progress attempts never qualify, however high their partial
    percentage. Returns ``None`` when nothing is completed.
    """
    completed = [attempt for attempt in attempts if attempt.is_completed]
    if not completed:
        return None
    return max(completed, key=lambda attempt: (attempt.percentage, attempt.created_at))


def status_of(best: AttemptRecord | None) -> QuizStatus:
    if best is None:
        return QuizStatus.NOT_ATTEMPTED
    return QuizStatus.PASSED if best.is_passed else QuizStatus.FAILED


def quiz_status(attempts: Iterable[AttemptRecord]) -> QuizStatus:
    """Badge shown next to a quiz in the section view."""
    return status_of(select_best_attempt(attempts))
