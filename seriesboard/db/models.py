"""SQLAlchemy ORM models backing the quiz catalog and attempt store.

Tables
------
- users            – learner profiles (identity + display name only)
- test_series      – curated quiz collections
- sections         – ordered sub-groupings of a series
- section_quizzes  – section ↔ quiz membership with ordering
- series_quizzes   – legacy quizzes attached directly to a series
- quizzes          – quiz metadata (time limit, question count)
- enrollments      – user ↔ series enrollment
- quiz_attempts    – append-only attempt records
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seriesboard.db.session import Base


# ── helpers ───────────────────────────────────────────────────────────────────


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


# ── Users ─────────────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    attempts: Mapped[list["QuizAttempt"]] = relationship(back_populates="user")

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


# ── Quizzes ───────────────────────────────────────────────────────────────────


class Quiz(Base):
    __tablename__ = "quizzes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    title: Mapped[str] = mapped_column(String(255))
    time_limit_minutes: Mapped[int] = mapped_column(Integer, default=0)
    question_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )


# ── Test series ───────────────────────────────────────────────────────────────


class TestSeries(Base):
    __tablename__ = "test_series"
    __test__ = False  # keep pytest from collecting this class

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    sections: Mapped[list["Section"]] = relationship(
        back_populates="series",
        cascade="all, delete-orphan",
        order_by="Section.order",
    )
    legacy_quizzes: Mapped[list["SeriesQuiz"]] = relationship(
        back_populates="series",
        cascade="all, delete-orphan",
        order_by="SeriesQuiz.position",
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="series", cascade="all, delete-orphan"
    )


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    series_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("test_series.id")
    )
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "order" is reserved in SQL, so the column carries a different name.
    order: Mapped[int] = mapped_column("sort_order", Integer, default=0)

    series: Mapped["TestSeries"] = relationship(back_populates="sections")
    quiz_links: Mapped[list["SectionQuiz"]] = relationship(
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="SectionQuiz.position",
    )


class SectionQuiz(Base):
    """Join table between Section and Quiz with ordering."""

    __tablename__ = "section_quizzes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    section_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("sections.id")
    )
    quiz_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quizzes.id")
    )
    position: Mapped[int] = mapped_column(Integer, default=0)

    section: Mapped["Section"] = relationship(back_populates="quiz_links")
    quiz: Mapped["Quiz"] = relationship("Quiz")

    __table_args__ = (
        UniqueConstraint("section_id", "quiz_id", name="uq_section_quiz"),
    )


class SeriesQuiz(Base):
    """Legacy quiz attached to a series without section membership."""

    __tablename__ = "series_quizzes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    series_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("test_series.id")
    )
    quiz_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quizzes.id")
    )
    position: Mapped[int] = mapped_column(Integer, default=0)

    series: Mapped["TestSeries"] = relationship(back_populates="legacy_quizzes")
    quiz: Mapped["Quiz"] = relationship("Quiz")

    __table_args__ = (
        UniqueConstraint("series_id", "quiz_id", name="uq_series_quiz"),
    )


# ── Enrollments ───────────────────────────────────────────────────────────────


class Enrollment(Base):
    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id")
    )
    series_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("test_series.id")
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    user: Mapped["User"] = relationship(back_populates="enrollments")
    series: Mapped["TestSeries"] = relationship(back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("user_id", "series_id", name="uq_user_series"),
    )


# ── Attempts ──────────────────────────────────────────────────────────────────


class QuizAttempt(Base):
    """One attempt at a quiz. Rows are only ever inserted."""

    __tablename__ = "quiz_attempts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=_uuid
    )
    quiz_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quizzes.id"), index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )
    score: Mapped[float] = mapped_column(Float, default=0.0)
    max_score: Mapped[float] = mapped_column(Float, default=0.0)
    percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    is_passed: Mapped[bool] = mapped_column(Boolean, default=False)
    time_spent_seconds: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    user: Mapped["User"] = relationship(back_populates="attempts")
    quiz: Mapped["Quiz"] = relationship("Quiz")
