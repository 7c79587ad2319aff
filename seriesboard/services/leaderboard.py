"""Series leaderboard: ordering, dense ranks, paging and rank lookup.

Ordering key
------------
1. average score percent, descending
2. completion percent, descending
3. total time spent, ascending (less time wins a tie)
4. user id, ascending, so equal standings still get distinct ranks

Ranks are ``1..N`` with no gaps and no sharing. Users who never completed a
quiz are still ranked; with zero completion they land after everyone who
has. Ranking always works on the unrounded snapshot values and nothing is
cached between calls.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable, Mapping, Sequence
from typing import NamedTuple

from seriesboard.schemas.attempt import AttemptRecord
from seriesboard.schemas.catalog import SeriesCatalog
from seriesboard.schemas.common import round_minutes, round_percent
from seriesboard.schemas.leaderboard import LeaderboardEntry, LeaderboardPage, Pagination
from seriesboard.schemas.progress import ProgressSnapshot, SeriesProgress
from seriesboard.services.progress import compute_progress

logger = logging.getLogger(__name__)

AttemptsByQuiz = Mapping[uuid.UUID, Sequence[AttemptRecord]]


class Participant(NamedTuple):
    user_id: uuid.UUID
    display_name: str | None = None


def _ranking_key(item: tuple[uuid.UUID, ProgressSnapshot]):
    user_id, snapshot = item
    return (
        -snapshot.average_score_percent,
        -snapshot.completion_percent,
        snapshot.time_spent_seconds,
        str(user_id),
    )


def _check_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")


def build_entry(
    rank: int,
    user_id: uuid.UUID,
    snapshot: ProgressSnapshot,
    display_name: str | None = None,
) -> LeaderboardEntry:
    """Presentation-facing entry; this is where rounding happens."""
    average_seconds = (
        snapshot.time_spent_seconds / snapshot.completed_count
        if snapshot.completed_count
        else 0
    )
    return LeaderboardEntry(
        rank=rank,
        user_id=str(user_id),
        display_name=display_name,
        average_percentage=round_percent(snapshot.average_score_percent),
        completion_percentage=round_percent(snapshot.completion_percent),
        completed_quizzes=snapshot.completed_count,
        total_quizzes=snapshot.total_count,
        total_time_spent_minutes=round_minutes(snapshot.time_spent_seconds),
        average_time_per_quiz=round_minutes(average_seconds),
    )


def rank_all(
    entries: Mapping[uuid.UUID, ProgressSnapshot],
    display_names: Mapping[uuid.UUID, str | None] | None = None,
) -> list[LeaderboardEntry]:
    """Full ranked list, best first."""
    names = display_names or {}
    ordered = sorted(entries.items(), key=_ranking_key)
    return [
        build_entry(position, user_id, snapshot, names.get(user_id))
        for position, (user_id, snapshot) in enumerate(ordered, start=1)
    ]


def locate(ranked: Sequence[LeaderboardEntry], user_id: uuid.UUID | str) -> LeaderboardEntry | None:
    """Find *user_id* in a ranked list regardless of paging."""
    wanted = str(user_id)
    return next((entry for entry in ranked if entry.user_id == wanted), None)


def paginate(
    ranked: Sequence[LeaderboardEntry],
    page: int,
    page_size: int,
    requesting_user_id: uuid.UUID | str | None = None,
) -> LeaderboardPage:
    """Slice *ranked* and attach the requester's entry when it is off-page."""
    _check_paging(page, page_size)
    total = len(ranked)
    start = (page - 1) * page_size
    window = list(ranked[start:start + page_size])

    user_position = None
    if requesting_user_id is not None:
        wanted = str(requesting_user_id)
        if not any(entry.user_id == wanted for entry in window):
            user_position = locate(ranked, wanted)

    return LeaderboardPage(
        entries=window,
        pagination=Pagination(
            current_page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
            total_entries=total,
            has_next=page * page_size < total,
            has_prev=page > 1,
        ),
        user_position=user_position,
    )


def rank(
    entries: Mapping[uuid.UUID, ProgressSnapshot],
    page: int,
    page_size: int,
    requesting_user_id: uuid.UUID | str | None = None,
    display_names: Mapping[uuid.UUID, str | None] | None = None,
) -> LeaderboardPage:
    """Rank every user in *entries* and return the requested page.

    An empty mapping yields an empty page with ``total_entries == 0``.
    """
    _check_paging(page, page_size)
    ranked = rank_all(entries, display_names)
    logger.debug("Ranked %d users (page %d, size %d)", len(ranked), page, page_size)
    return paginate(ranked, page, page_size, requesting_user_id)


def compute_standings(
    catalog: SeriesCatalog,
    participants: Sequence[Participant],
    attempts_for_user: Callable[[uuid.UUID], AttemptsByQuiz],
) -> dict[uuid.UUID, SeriesProgress]:
    """Progress for every enrolled user, computed from scratch."""
    return {
        participant.user_id: compute_progress(catalog, attempts_for_user(participant.user_id))
        for participant in participants
    }


def rank_series(
    catalog: SeriesCatalog,
    participants: Sequence[Participant],
    attempts_for_user: Callable[[uuid.UUID], AttemptsByQuiz],
    page: int,
    page_size: int,
    requesting_user_id: uuid.UUID | str | None = None,
) -> LeaderboardPage:
    """Leaderboard page for a whole series.

    *attempts_for_user* must return the complete attempt set for a user; a
    partial set would silently understate that user's standing.
    """
    _check_paging(page, page_size)
    standings = compute_standings(catalog, participants, attempts_for_user)
    return rank(
        {user_id: progress.overall for user_id, progress in standings.items()},
        page,
        page_size,
        requesting_user_id=requesting_user_id,
        display_names={p.user_id: p.display_name for p in participants},
    )
