"""SQLAlchemy-backed quiz catalog and attempt store.

These are the collaborators the engine reads from. They translate ORM rows
into the engine's schemas; none of the aggregation happens here.
"""

import logging
import uuid
from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy.orm import Session, selectinload

from seriesboard.db.models import (
    Enrollment,
    Quiz,
    QuizAttempt,
    Section,
    SectionQuiz,
    SeriesQuiz,
    TestSeries,
    User,
)
from seriesboard.schemas.attempt import AttemptRecord
from seriesboard.schemas.catalog import QuizInfo, SectionInfo, SeriesCatalog
from seriesboard.services.leaderboard import Participant

logger = logging.getLogger(__name__)


def _quiz_info(quiz: Quiz, section_id: uuid.UUID | None = None) -> QuizInfo:
    return QuizInfo(
        id=quiz.id,
        title=quiz.title,
        time_limit=quiz.time_limit_minutes or 0,
        question_count=quiz.question_count or 0,
        section_id=section_id,
    )


class SqlQuizCatalog:
    """Series structure and enrollment, read from the relational store."""

    def __init__(self, db: Session):
        self.db = db

    def load_catalog(self, series_id: uuid.UUID) -> SeriesCatalog | None:
        series = (
            self.db.query(TestSeries)
            .options(
                selectinload(TestSeries.sections)
                .selectinload(Section.quiz_links)
                .selectinload(SectionQuiz.quiz),
                selectinload(TestSeries.legacy_quizzes).selectinload(SeriesQuiz.quiz),
            )
            .filter(TestSeries.id == series_id)
            .first()
        )
        if series is None:
            return None

        return SeriesCatalog(
            id=series.id,
            title=series.title,
            sections=[
                SectionInfo(
                    id=section.id,
                    title=section.title,
                    description=section.description,
                    order=section.order or 0,
                    quizzes=[_quiz_info(link.quiz, section.id) for link in section.quiz_links],
                )
                for section in series.sections
            ],
            legacy_quizzes=[_quiz_info(link.quiz) for link in series.legacy_quizzes],
        )

    def list_participants(self, series_id: uuid.UUID) -> list[Participant]:
        rows = (
            self.db.query(User)
            .join(Enrollment, Enrollment.user_id == User.id)
            .filter(Enrollment.series_id == series_id)
            .order_by(Enrollment.enrolled_at)
            .all()
        )
        return [Participant(user.id, user.display_name) for user in rows]

    def get_participant(self, series_id: uuid.UUID, user_id: uuid.UUID) -> Participant | None:
        user = (
            self.db.query(User)
            .join(Enrollment, Enrollment.user_id == User.id)
            .filter(Enrollment.series_id == series_id, User.id == user_id)
            .first()
        )
        return Participant(user.id, user.display_name) if user else None


class SqlAttemptStore:
    """Attempts of a set of quizzes, loaded with a single query.

    ``list_attempts`` is a dictionary read afterwards, so the collector may
    call it from worker threads without touching the session.
    """

    def __init__(
        self,
        db: Session,
        quiz_ids: Iterable[uuid.UUID],
        user_ids: Iterable[uuid.UUID] | None = None,
    ):
        self._attempts: dict[tuple[uuid.UUID, uuid.UUID], list[AttemptRecord]] = defaultdict(list)
        quiz_ids = list(quiz_ids)
        if not quiz_ids:
            return

        q = db.query(QuizAttempt).filter(QuizAttempt.quiz_id.in_(quiz_ids))
        if user_ids is not None:
            q = q.filter(QuizAttempt.user_id.in_(list(user_ids)))

        count = 0
        for row in q.order_by(QuizAttempt.created_at).all():
            self._attempts[(row.user_id, row.quiz_id)].append(AttemptRecord.model_validate(row))
            count += 1
        logger.debug("Loaded %d attempts across %d quizzes", count, len(quiz_ids))

    def list_attempts(self, user_id: uuid.UUID, quiz_id: uuid.UUID) -> list[AttemptRecord]:
        return list(self._attempts.get((user_id, quiz_id), ()))
