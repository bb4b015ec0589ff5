"""Query planner for patient list and search endpoints.

Turns raw query parameters into a ``QueryPlan``: the filter clauses, the
ORDER BY column taken from the profile's allow-list, and the
LIMIT/OFFSET window. Strict profiles reject bad parameters; lenient ones
clamp or fall back to defaults.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, UnaryExpression, func, or_

from patientmock.constants import STATUSES
from patientmock.exceptions import ValidationError
from patientmock.models.patient import PatientRecord
from patientmock.versions import QueryProfile

# Free-text search matches any of these (case-insensitive substring)
SEARCH_COLUMNS = (
    PatientRecord.first_name,
    PatientRecord.last_name,
    PatientRecord.display_id,
    PatientRecord.email,
)

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass(frozen=True)
class QueryPlan:
    """Validated list/search query."""

    filters: tuple[ColumnElement[bool], ...]
    sort_by: str
    sort_column: ColumnElement[Any]
    sort_direction: str
    page_no: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page_no - 1) * self.page_size

    def order_by(self) -> list[UnaryExpression[Any]]:
        """Requested ordering plus the key as a tiebreaker for stable pages."""
        primary = self.sort_column.desc() if self.sort_direction == "DESC" else self.sort_column.asc()
        return [primary, PatientRecord.id.asc()]

    def pages_count(self, total_records: int) -> int:
        return pages_count(total_records, self.page_size)


def pages_count(total_records: int, page_size: int) -> int:
    """``ceil(total / size)``; zero when there are no records."""
    if total_records <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_records / page_size)


def _raw(params: Mapping[str, Any], *names: str) -> str | None:
    for name in names:
        value = params.get(name)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return None


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_bool(raw: str) -> bool | None:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def text_filter(q: str) -> ColumnElement[bool]:
    """OR of case-insensitive substring matches across the searchable columns."""
    return or_(*(func.coalesce(column, "").icontains(q, autoescape=True) for column in SEARCH_COLUMNS))


def plan_query(params: Mapping[str, Any], profile: QueryProfile) -> QueryPlan:
    """Validate query parameters against a profile and build the plan.

    Recognized parameters: ``q``, ``pageNo``, ``pageSize``, ``sortBy``,
    ``sortMethod``/``sortDirection``, ``isPinned`` and ``status``.

    Raises:
        ValidationError: In strict profiles, listing every bad parameter.
    """
    issues: list[str] = []

    # Page number
    raw_page_no = _raw(params, "pageNo")
    page_no = _parse_int(raw_page_no)
    if page_no is None or page_no < 1:
        if raw_page_no is not None and profile.strict:
            issues.append("Invalid query parameter: pageNo must be greater than or equal to 1")
        page_no = 1

    # Page size
    raw_page_size = _raw(params, "pageSize")
    page_size = _parse_int(raw_page_size)
    if page_size is None or not 1 <= page_size <= profile.max_page_size:
        if raw_page_size is not None and profile.strict:
            issues.append(
                f"Invalid query parameter: pageSize must be between 1 and {profile.max_page_size}"
            )
        page_size = max(1, min(profile.max_page_size, page_size or profile.default_page_size))

    # Sort column, only ever taken from the allow-list
    sort_by = _raw(params, "sortBy")
    if sort_by is None or sort_by not in profile.sort_columns:
        if sort_by is not None and profile.strict:
            allowed = ", ".join(profile.sort_columns)
            issues.append(f"Invalid sortBy value. Must be one of: {allowed}")
        sort_by = profile.default_sort

    direction = (_raw(params, "sortMethod", "sortDirection") or "ASC").upper()
    if direction not in ("ASC", "DESC"):
        direction = "ASC"

    filters: list[ColumnElement[bool]] = []

    q = _raw(params, "q")
    if q:
        filters.append(text_filter(q))

    raw_pinned = _raw(params, "isPinned")
    if raw_pinned is not None:
        pinned = _parse_bool(raw_pinned)
        if pinned is None and profile.strict:
            issues.append("Invalid query parameter: isPinned must be true or false")
        filters.append(PatientRecord.is_pinned == bool(pinned))

    raw_status = _raw(params, "status")
    if raw_status is not None:
        status_value = raw_status.upper()
        if status_value in STATUSES:
            filters.append(PatientRecord.status == status_value)
        elif profile.strict:
            issues.append(f"Invalid query parameter: status must be one of: {', '.join(STATUSES)}")

    if issues:
        raise ValidationError(issues, message="Bad Request", error_code="INVALID_QUERY")

    return QueryPlan(
        filters=tuple(filters),
        sort_by=sort_by,
        sort_column=profile.sort_columns[sort_by](),
        sort_direction=direction,
        page_no=page_no,
        page_size=page_size,
    )
