"""Unit tests for best-attempt selection and quiz status."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from seriesboard.schemas.attempt import AttemptRecord
from seriesboard.schemas.progress import QuizStatus
from seriesboard.services.best_attempt import quiz_status, select_best_attempt

QUIZ = uuid.uuid4()
USER = uuid.uuid4()
T0 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def _attempt(percentage: float, minutes: int = 0, completed: bool = True, passed: bool = True) -> AttemptRecord:
    return AttemptRecord(
        id=uuid.uuid4(),
        quiz_id=QUIZ,
        user_id=USER,
        percentage=percentage,
        is_completed=completed,
        is_passed=passed,
        created_at=T0 + timedelta(minutes=minutes),
    )


class TestSelectBestAttempt:
    def test_highest_percentage_wins(self):
        x = _attempt(60, minutes=0)
        y = _attempt(85, minutes=10)
        assert select_best_attempt([x, y]) is y

    def test_incomplete_attempt_never_selected(self):
        assert select_best_attempt([_attempt(95, completed=False)]) is None

    def test_incomplete_high_score_does_not_beat_completed(self):
        done = _attempt(40)
        partial = _attempt(99, minutes=5, completed=False)
        assert select_best_attempt([done, partial]) is done

    def test_tie_goes_to_most_recent(self):
        older = _attempt(70, minutes=0)
        newer = _attempt(70, minutes=30)
        assert select_best_attempt([newer, older]) is newer
        assert select_best_attempt([older, newer]) is newer

    def test_empty_list(self):
        assert select_best_attempt([]) is None

    def test_idempotent(self):
        attempts = [_attempt(50), _attempt(75, minutes=1), _attempt(75, minutes=2, completed=False)]
        assert select_best_attempt(attempts) == select_best_attempt(attempts)

    def test_naive_and_aware_timestamps_compare(self):
        aware = _attempt(80, minutes=0)
        naive = AttemptRecord(
            quiz_id=QUIZ,
            user_id=USER,
            percentage=80,
            is_completed=True,
            created_at=datetime(2026, 1, 1, 10, 0),
        )
        assert select_best_attempt([aware, naive]) is naive


class TestAttemptRecordPercentage:
    def test_derived_from_score_when_max_score_positive(self):
        attempt = AttemptRecord(
            quiz_id=QUIZ, user_id=USER, score=18, max_score=20,
            percentage=10, created_at=T0,
        )
        assert attempt.percentage == pytest.approx(90.0)

    def test_supplied_value_kept_without_max_score(self):
        attempt = AttemptRecord(
            quiz_id=QUIZ, user_id=USER, score=0, max_score=0,
            percentage=42.5, created_at=T0,
        )
        assert attempt.percentage == 42.5

    def test_nulls_become_zero(self):
        attempt = AttemptRecord(
            quiz_id=QUIZ, user_id=USER, score=None, max_score=None,
            percentage=None, time_spent_seconds=None, created_at=T0,
        )
        assert (attempt.score, attempt.max_score, attempt.percentage) == (0, 0, 0)

    def test_score_beats_stale_percentage_in_selection(self):
        stale = AttemptRecord(
            quiz_id=QUIZ, user_id=USER, score=5, max_score=10,
            percentage=99, is_completed=True, created_at=T0,
        )
        honest = _attempt(70, minutes=1)
        assert select_best_attempt([stale, honest]) is honest


class TestQuizStatus:
    def test_not_attempted(self):
        assert quiz_status([]) == QuizStatus.NOT_ATTEMPTED

    def test_only_incomplete_counts_as_not_attempted(self):
        assert quiz_status([_attempt(90, completed=False)]) == QuizStatus.NOT_ATTEMPTED

    def test_passed_and_failed(self):
        assert quiz_status([_attempt(90, passed=True)]) == QuizStatus.PASSED
        assert quiz_status([_attempt(30, passed=False)]) == QuizStatus.FAILED

    def test_status_follows_best_attempt(self):
        failed_low = _attempt(30, passed=False)
        passed_high = _attempt(80, minutes=1, passed=True)
        assert quiz_status([failed_low, passed_high]) == QuizStatus.PASSED
