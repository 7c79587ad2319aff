"""One-time DB setup: create tables and seed a demo test series."""
from datetime import datetime, timedelta, timezone

from seriesboard.db.session import Base, get_engine, get_session_factory
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

DEMO_TITLE = "Demo Test Series"

# 1. Create all tables
engine = get_engine()
Base.metadata.create_all(bind=engine)
print("✅ All tables created")

session_factory = get_session_factory()
with session_factory() as db:
    series = db.query(TestSeries).filter(TestSeries.title == DEMO_TITLE).first()
    if series:
        print("  Demo series already exists")
        raise SystemExit(0)

    # 2. Quizzes: two sectioned, one legacy, one listed in both places
    algebra = Quiz(title="Algebra Basics", time_limit_minutes=20, question_count=10)
    geometry = Quiz(title="Geometry Drill", time_limit_minutes=30, question_count=20)
    mock = Quiz(title="Full Mock Test", time_limit_minutes=60, question_count=30)
    db.add_all([algebra, geometry, mock])
    db.flush()

    series = TestSeries(title=DEMO_TITLE, description="Seeded by seed_db.py")
    db.add(series)
    db.flush()

    section = Section(series_id=series.id, title="Mathematics", order=1)
    db.add(section)
    db.flush()
    db.add_all([
        SectionQuiz(section_id=section.id, quiz_id=algebra.id, position=0),
        SectionQuiz(section_id=section.id, quiz_id=geometry.id, position=1),
        SeriesQuiz(series_id=series.id, quiz_id=geometry.id, position=0),
        SeriesQuiz(series_id=series.id, quiz_id=mock.id, position=1),
    ])
    print("✅ Created demo series with 3 unique quizzes")

    # 3. Learners and their attempts
    now = datetime.now(timezone.utc)
    learners = {
        "asha": [(algebra, 8, 10, 540), (geometry, 18, 20, 1500), (mock, 27, 30, 3300)],
        "ben": [(algebra, 9, 10, 600), (geometry, 15, 20, 1700)],
        "chidi": [],
    }
    for username, attempts in learners.items():
        user = User(username=username, full_name=username.title())
        db.add(user)
        db.flush()
        db.add(Enrollment(user_id=user.id, series_id=series.id))
        for offset, (quiz, score, max_score, seconds) in enumerate(attempts):
            db.add(
                QuizAttempt(
                    quiz_id=quiz.id,
                    user_id=user.id,
                    score=score,
                    max_score=max_score,
                    is_completed=True,
                    is_passed=score / max_score >= 0.6,
                    time_spent_seconds=seconds,
                    created_at=now - timedelta(days=offset),
                )
            )
        print(f"✅ Enrolled {username} with {len(attempts)} attempts")

    db.commit()
    print(f"\n🎉 Demo series ready: {series.id}")
