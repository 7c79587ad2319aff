"""Unit tests for upstream leaderboard normalisation."""

import pytest

from seriesboard.core.errors import MalformedInputError
from seriesboard.services.normalizer import normalize


def _entry(rank: int, user_id: str, avg: float = 50.0) -> dict:
    return {
        "rank": rank,
        "user": {"_id": user_id, "username": f"user{rank}", "fullName": f"User {rank}"},
        "averagePercentage": avg,
        "completionPercentage": 40.0,
        "completedQuizzes": 2,
        "totalQuizzes": 5,
        "totalTimeSpentMinutes": 33,
    }


class TestLegacyList:
    def test_bare_list_is_one_unpaginated_page(self):
        page = normalize([_entry(1, "a"), _entry(2, "b")])

        assert [e.user_id for e in page.entries] == ["a", "b"]
        assert page.pagination.total_entries == 2
        assert page.pagination.total_pages == 1
        assert page.pagination.current_page == 1
        assert page.pagination.has_next is False
        assert page.pagination.has_prev is False
        assert page.user_position is None

    def test_empty_list(self):
        page = normalize([])
        assert page.entries == []
        assert page.pagination.total_entries == 0
        assert page.pagination.total_pages == 0

    def test_legacy_durations_in_seconds(self):
        raw = [{"rank": 1, "userId": "x", "totalTimeSpent": 1800, "averageTimePerQuiz": 600}]
        entry = normalize(raw).entries[0]
        assert entry.total_time_spent_minutes == 30
        assert entry.average_time_per_quiz == 10


class TestPaginatedShape:
    def test_camel_case_fields_mapped(self):
        raw = {
            "entries": [_entry(6, "u6", 71.25)],
            "pagination": {
                "currentPage": 2,
                "pageSize": 5,
                "totalPages": 3,
                "totalEntries": 11,
                "hasNext": True,
                "hasPrev": True,
            },
            "userPosition": _entry(9, "me", 12.5),
        }

        page = normalize(raw)

        entry = page.entries[0]
        assert entry.rank == 6
        assert entry.user_id == "u6"
        assert entry.display_name == "User 6"
        assert entry.average_percentage == 71.25
        assert entry.completed_quizzes == 2
        assert entry.total_quizzes == 5
        assert entry.total_time_spent_minutes == 33
        assert page.pagination.model_dump() == {
            "current_page": 2,
            "page_size": 5,
            "total_pages": 3,
            "total_entries": 11,
            "has_next": True,
            "has_prev": True,
        }
        assert page.user_position.user_id == "me"
        assert page.user_position.rank == 9

    def test_snake_case_fields_mapped(self):
        raw = {
            "entries": [{"rank": 1, "user_id": "s1", "display_name": "Snake", "average_percentage": 90}],
            "pagination": {"current_page": 1, "page_size": 10, "total_entries": 1},
            "user_position": None,
        }

        page = normalize(raw)

        assert page.entries[0].display_name == "Snake"
        assert page.entries[0].average_percentage == 90.0
        assert page.user_position is None

    def test_older_leaderboard_key(self):
        raw = {"leaderboard": [_entry(1, "a")], "pagination": {"total": 1, "page": 1, "limit": 10}}
        page = normalize(raw)
        assert len(page.entries) == 1
        assert page.pagination.page_size == 10

    def test_missing_pagination_fields_derived(self):
        raw = {"entries": [_entry(1, "a"), _entry(2, "b")], "pagination": {"currentPage": 1, "pageSize": 2, "totalEntries": 7}}

        pagination = normalize(raw).pagination

        assert pagination.total_pages == 4
        assert pagination.has_next is True
        assert pagination.has_prev is False

    def test_empty_pagination_block(self):
        page = normalize({"entries": [], "pagination": {}})
        assert page.pagination.current_page == 1
        assert page.pagination.total_entries == 0
        assert page.pagination.has_next is False

    def test_missing_entry_fields_default(self):
        page = normalize({"entries": [{}], "pagination": None})
        entry = page.entries[0]
        assert entry.rank == 0
        assert entry.user_id is None
        assert entry.display_name is None
        assert entry.average_percentage == 0.0
        assert entry.total_time_spent_minutes == 0

    def test_user_given_as_plain_id(self):
        page = normalize({"entries": [{"rank": 1, "user": "64f0c0ffee"}], "pagination": {}})
        assert page.entries[0].user_id == "64f0c0ffee"

    def test_numeric_user_id_kept_as_string(self):
        page = normalize([{"rank": 1, "userId": 42}])
        assert page.entries[0].user_id == "42"

    def test_unknown_fields_ignored(self):
        page = normalize([{"rank": 1, "userId": "a", "badge": "gold"}])
        assert page.entries[0].user_id == "a"


class TestEnvelope:
    def test_data_envelope_around_list(self):
        page = normalize({"success": True, "data": [_entry(1, "a")]})
        assert page.pagination.total_entries == 1

    def test_data_envelope_around_paginated(self):
        raw = {"data": {"entries": [_entry(1, "a")], "pagination": {"totalEntries": 30, "pageSize": 1}}}
        page = normalize(raw)
        assert page.pagination.total_pages == 30
        assert page.pagination.has_next is True

    def test_envelope_unwrapped_only_once(self):
        with pytest.raises(MalformedInputError):
            normalize({"data": {"data": [_entry(1, "a")]}})


class TestMalformedInput:
    @pytest.mark.parametrize("raw", ["leaderboard", 42, None, True])
    def test_scalars_rejected(self, raw):
        with pytest.raises(MalformedInputError):
            normalize(raw)

    def test_object_without_pagination(self):
        with pytest.raises(MalformedInputError) as exc_info:
            normalize({"entries": []})
        assert exc_info.value.details == {"keys": ["entries"]}
        assert exc_info.value.status_code == 422

    def test_entries_not_a_list(self):
        with pytest.raises(MalformedInputError):
            normalize({"entries": {"rank": 1}, "pagination": {}})

    def test_entry_not_an_object(self):
        with pytest.raises(MalformedInputError):
            normalize([_entry(1, "a"), "b"])

    def test_pagination_not_an_object(self):
        with pytest.raises(MalformedInputError):
            normalize({"entries": [], "pagination": 3})

    def test_bad_field_type(self):
        with pytest.raises(MalformedInputError) as exc_info:
            normalize([{"rank": 1, "averagePercentage": "high"}])
        assert exc_info.value.error_code == "malformed_input"
        assert exc_info.value.details["errors"]


class TestNumericEdges:
    def test_non_finite_numbers_count_as_missing(self):
        raw = [{
            "rank": 1,
            "averagePercentage": float("nan"),
            "completionPercentage": float("inf"),
            "totalTimeSpentMinutes": float("-inf"),
        }]

        entry = normalize(raw).entries[0]

        assert entry.average_percentage == 0.0
        assert entry.completion_percentage == 0.0
        assert entry.total_time_spent_minutes == 0

    def test_non_finite_minutes_fall_back_to_legacy_seconds(self):
        raw = [{"rank": 1, "totalTimeSpentMinutes": float("nan"), "totalTimeSpent": 600}]
        assert normalize(raw).entries[0].total_time_spent_minutes == 10

    def test_legacy_half_minutes_round_up(self):
        raw = [{"rank": 1, "totalTimeSpent": 30, "averageTimePerQuiz": 150}]
        entry = normalize(raw).entries[0]
        assert entry.total_time_spent_minutes == 1
        assert entry.average_time_per_quiz == 3

    def test_total_without_page_size_is_one_page(self):
        page = normalize({"entries": [], "pagination": {"totalEntries": 30}})

        assert page.pagination.total_entries == 30
        assert page.pagination.total_pages == 1
        assert page.pagination.has_next is False
