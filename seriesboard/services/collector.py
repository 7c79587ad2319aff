"""Concurrent per-quiz attempt fetching.

Aggregation needs a user's complete attempt set, so the collector issues one
fetch per quiz in parallel and waits for all of them. A fetch that fails is
logged and treated as "no attempts on that quiz"; one missing data point
must not block the whole leaderboard.

Usage
-----
```python
with AttemptCollector(store.list_attempts) as collector:
    attempts_by_quiz = collector.collect(user_id, quiz_ids)
```
"""

import logging
import uuid
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from seriesboard.config import settings
from seriesboard.schemas.attempt import AttemptRecord

logger = logging.getLogger(__name__)

FetchAttempts = Callable[[uuid.UUID, uuid.UUID], Sequence[AttemptRecord]]


class AttemptCollector:
    def __init__(self, fetch: FetchAttempts, max_workers: int | None = None):
        self._fetch = fetch
        self._max_workers = max_workers or settings.ATTEMPT_FETCH_WORKERS
        self._pool: ThreadPoolExecutor | None = None

    def __enter__(self) -> "AttemptCollector":
        self._pool = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="attempt-fetch"
        )
        return self

    def __exit__(self, *exc_info) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def collect(
        self, user_id: uuid.UUID, quiz_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, list[AttemptRecord]]:
        """Fetch every quiz's attempts for *user_id*; returns once all are done."""
        if self._pool is None:
            raise RuntimeError("AttemptCollector must be used as a context manager")

        futures: dict[uuid.UUID, Future] = {}
        for quiz_id in quiz_ids:
            if quiz_id not in futures:
                futures[quiz_id] = self._pool.submit(self._fetch, user_id, quiz_id)

        return {
            quiz_id: self._settle(user_id, quiz_id, future)
            for quiz_id, future in futures.items()
        }

    @staticmethod
    def _settle(user_id: uuid.UUID, quiz_id: uuid.UUID, future: Future) -> list[AttemptRecord]:
        try:
            return list(future.result())
        except Exception as e:
            logger.warning(
                "Attempt fetch failed for user=%s quiz=%s, counting as no attempts: %s",
                user_id, quiz_id, e,
            )
            return []
