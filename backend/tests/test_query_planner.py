"""Tests for list/search query planning."""

import pytest

from patientmock.exceptions import ValidationError
from patientmock.models.patient import PatientRecord
from patientmock.services.query_planner import pages_count, plan_query
from patientmock.versions import LEGACY_QUERY, SEARCH_QUERY, V1_QUERY


class TestDefaults:
    """Tests for plans built from empty parameters."""

    def test_defaults_for_lenient_profile(self):
        plan = plan_query({}, V1_QUERY)
        assert plan.page_no == 1
        assert plan.page_size == 25
        assert plan.sort_by == "firstName"
        assert plan.sort_direction == "ASC"
        assert plan.offset == 0
        assert plan.filters == ()

    def test_defaults_for_search_profile(self):
        plan = plan_query({}, SEARCH_QUERY)
        assert plan.sort_by == "LAST_NAME"
        assert plan.sort_column is PatientRecord.last_name

    def test_empty_strings_are_treated_as_absent(self):
        plan = plan_query({"pageNo": "", "sortBy": "  ", "q": ""}, LEGACY_QUERY)
        assert plan.page_no == 1
        assert plan.sort_by == "lastName"
        assert plan.filters == ()

    def test_offset_from_page(self):
        plan = plan_query({"pageNo": "3", "pageSize": "10"}, V1_QUERY)
        assert plan.offset == 20


class TestLenientProfile:
    """Lenient profiles clamp or fall back instead of failing."""

    def test_page_no_below_one_is_clamped(self):
        assert plan_query({"pageNo": "0"}, V1_QUERY).page_no == 1
        assert plan_query({"pageNo": "abc"}, V1_QUERY).page_no == 1

    def test_page_size_is_clamped_to_max(self):
        assert plan_query({"pageSize": "500"}, V1_QUERY).page_size == 100

    def test_zero_page_size_uses_default(self):
        assert plan_query({"pageSize": "0"}, V1_QUERY).page_size == 25

    def test_negative_page_size_is_clamped_to_one(self):
        assert plan_query({"pageSize": "-4"}, V1_QUERY).page_size == 1

    def test_unknown_sort_falls_back_to_default_column(self):
        plan = plan_query({"sortBy": "lastName; DROP TABLE patients"}, V1_QUERY)
        assert plan.sort_by == "firstName"
        assert plan.sort_column is PatientRecord.first_name

    def test_unknown_status_is_ignored(self):
        assert plan_query({"status": "ARCHIVED"}, V1_QUERY).filters == ()


class TestStrictProfile:
    """Strict profiles reject bad parameters with INVALID_QUERY."""

    def test_rejects_page_no_below_one(self):
        with pytest.raises(ValidationError) as exc_info:
            plan_query({"pageNo": "0"}, LEGACY_QUERY)
        assert exc_info.value.error_code == "INVALID_QUERY"
        assert exc_info.value.issues == [
            "Invalid query parameter: pageNo must be greater than or equal to 1"
        ]

    def test_rejects_page_size_above_max(self):
        with pytest.raises(ValidationError) as exc_info:
            plan_query({"pageSize": "26"}, LEGACY_QUERY)
        assert exc_info.value.issues == ["Invalid query parameter: pageSize must be between 1 and 25"]

    def test_rejects_unknown_sort(self):
        with pytest.raises(ValidationError) as exc_info:
            plan_query({"sortBy": "email"}, SEARCH_QUERY)
        assert exc_info.value.issues == [
            "Invalid sortBy value. Must be one of: LAST_NAME, FIRST_NAME, TEAM, ADDRESS, PATIENT_ID"
        ]

    def test_collects_every_issue(self):
        with pytest.raises(ValidationError) as exc_info:
            plan_query({"pageNo": "x", "pageSize": "0", "sortBy": "nope"}, SEARCH_QUERY)
        assert len(exc_info.value.issues) == 3

    def test_rejects_bad_pinned_filter(self):
        with pytest.raises(ValidationError):
            plan_query({"isPinned": "maybe"}, SEARCH_QUERY)

    def test_accepts_valid_parameters(self):
        plan = plan_query(
            {"pageNo": "2", "pageSize": "25", "sortBy": "TEAM", "sortMethod": "desc"},
            SEARCH_QUERY,
        )
        assert plan.page_no == 2
        assert plan.sort_by == "TEAM"
        assert plan.sort_direction == "DESC"


class TestSortDirection:
    """Sort direction is case-insensitive and falls back to ascending."""

    @pytest.mark.parametrize("raw,expected", [("asc", "ASC"), ("DESC", "DESC"), ("Desc", "DESC"), ("sideways", "ASC")])
    def test_direction(self, raw, expected):
        assert plan_query({"sortDirection": raw}, V1_QUERY).sort_direction == expected

    def test_sort_method_alias(self):
        assert plan_query({"sortMethod": "desc"}, SEARCH_QUERY).sort_direction == "DESC"

    def test_order_by_has_key_tiebreaker(self):
        order_by = plan_query({}, V1_QUERY).order_by()
        assert len(order_by) == 2


class TestFilters:
    """Tests for free-text and exact filters."""

    def test_text_query_adds_one_filter(self):
        assert len(plan_query({"q": "smith"}, V1_QUERY).filters) == 1

    def test_pinned_and_status_filters(self):
        plan = plan_query({"isPinned": "true", "status": "active"}, V1_QUERY)
        assert len(plan.filters) == 2


class TestPagesCount:
    """pagesCount is ceil(total / size), zero for an empty result."""

    @pytest.mark.parametrize(
        "total,size,expected",
        [(0, 25, 0), (1, 25, 1), (25, 25, 1), (26, 25, 2), (100, 10, 10), (101, 10, 11)],
    )
    def test_pages_count(self, total, size, expected):
        assert pages_count(total, size) == expected
