"""Named API versions for the patients resource.

Several generations of the patients endpoint coexist, each with its own
required fields, response shape and query rules. Each generation is a
plain configuration object here; routers, the normalizer and the query
planner read from it instead of branching per route.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy import ColumnElement

from patientmock.constants import DEFAULT_PAGE_SIZE, LEGACY_MAX_PAGE_SIZE, MAX_PAGE_SIZE
from patientmock.models.patient import PatientRecord

SortColumn = Callable[[], ColumnElement[Any]]


def _team_name() -> ColumnElement[Any]:
    return PatientRecord.team["name"].as_string()


@dataclass(frozen=True)
class QueryProfile:
    """Validation rules for list/search query parameters.

    Args:
        sort_columns: Allow-list mapping public sortBy values to columns.
            Column references are only ever taken from this mapping.
        default_sort: sortBy value used when none (or, if lenient, an
            unknown one) is supplied.
        max_page_size: Upper bound for pageSize.
        strict: Reject bad parameters instead of clamping them.
    """

    sort_columns: dict[str, SortColumn]
    default_sort: str
    max_page_size: int = MAX_PAGE_SIZE
    default_page_size: int = DEFAULT_PAGE_SIZE
    strict: bool = False

    def __post_init__(self) -> None:
        if self.default_sort not in self.sort_columns:
            raise ValueError(f"default_sort {self.default_sort!r} is not an allowed sort field")


@dataclass(frozen=True)
class ApiVersion:
    """One generation of the patients API.

    Required fields are expressed as groups of alternatives: a group is
    satisfied when any one of its keys carries a non-empty value.
    """

    name: str
    prefix: str
    projection: str
    query: QueryProfile
    create_required: tuple[tuple[str, ...], ...]
    replace_required: tuple[tuple[str, ...], ...]
    reject_duplicate_demographics: bool = False
    tags: list[str] = field(default_factory=lambda: ["patients"])


LEGACY_QUERY = QueryProfile(
    sort_columns={
        "firstName": lambda: PatientRecord.first_name,
        "lastName": lambda: PatientRecord.last_name,
        "patientId": lambda: PatientRecord.display_id,
        "team": _team_name,
    },
    default_sort="lastName",
    max_page_size=LEGACY_MAX_PAGE_SIZE,
    strict=True,
)

ADMIN_QUERY = QueryProfile(
    sort_columns={
        "firstName": lambda: PatientRecord.first_name,
        "lastName": lambda: PatientRecord.last_name,
        "dateOfBirth": lambda: PatientRecord.date_of_birth,
        "admissionDate": lambda: PatientRecord.admission_date,
    },
    default_sort="firstName",
)

V1_QUERY = QueryProfile(
    sort_columns={
        "firstName": lambda: PatientRecord.first_name,
        "lastName": lambda: PatientRecord.last_name,
        "dateOfBirth": lambda: PatientRecord.date_of_birth,
        "admissionDate": lambda: PatientRecord.admission_date,
        "patientId": lambda: PatientRecord.display_id,
        "id": lambda: PatientRecord.id,
        "team": _team_name,
    },
    default_sort="firstName",
)

SEARCH_QUERY = QueryProfile(
    sort_columns={
        "LAST_NAME": lambda: PatientRecord.last_name,
        "FIRST_NAME": lambda: PatientRecord.first_name,
        "TEAM": _team_name,
        "ADDRESS": lambda: PatientRecord.address,
        "PATIENT_ID": lambda: PatientRecord.display_id,
    },
    default_sort="LAST_NAME",
    strict=True,
)

LEGACY = ApiVersion(
    name="legacy",
    prefix="/api/patients",
    projection="summary",
    query=LEGACY_QUERY,
    create_required=(
        ("patientId",),
        ("firstName",),
        ("lastName",),
        ("teamName", "team"),
        ("dateOfBirth", "dob"),
    ),
    replace_required=(
        ("firstName",),
        ("lastName",),
        ("teamName", "team"),
        ("dateOfBirth", "dob"),
    ),
    reject_duplicate_demographics=True,
)

ADMIN = ApiVersion(
    name="admin",
    prefix="/api/v1/admin/patients",
    projection="detail",
    query=ADMIN_QUERY,
    create_required=(
        ("firstName",),
        ("lastName",),
        ("insurance",),
    ),
    replace_required=(
        ("firstName",),
        ("lastName",),
        ("insurance",),
    ),
    reject_duplicate_demographics=True,
    tags=["admin"],
)

V1 = ApiVersion(
    name="v1",
    prefix="/api/v1/patients",
    projection="list_item",
    query=V1_QUERY,
    create_required=(
        ("patientId", "id"),
        ("firstName",),
        ("lastName",),
        ("payer", "insurance"),
    ),
    replace_required=(
        ("firstName",),
        ("lastName",),
        ("payer", "insurance"),
    ),
)

API_VERSIONS: tuple[ApiVersion, ...] = (LEGACY, ADMIN, V1)


def get_version(name: str) -> ApiVersion:
    """Look up a registered version by name."""
    for version in API_VERSIONS:
        if version.name == name:
            return version
    raise KeyError(f"Unknown API version: {name}")
