"""Pydantic schemas for the patients API.

Response shapes are camelCase on the wire; fields are declared in
snake_case and aliased by ``to_camel``. Create/replace/patch bodies are
accepted as plain JSON objects and normalized by the service layer,
since several request dialects overlap.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from patientmock.constants import DEFAULT_GENERATE_COUNT


class CamelModel(BaseModel):
    """Base for all camelCase API models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Nested shapes ===


class TeamOut(CamelModel):
    team_id: str | None = None
    name: str | None = None


class PrimaryPayerOut(CamelModel):
    payer_id: str
    payer_type: str
    display_name: str


class LastOrderOut(CamelModel):
    order_number: str | None = None
    status: str | None = None
    order_date: str | None = None
    display_text: str | None = None


class LegacyPayerOut(CamelModel):
    payer_type_name: str
    plan_name: str
    plan_id: str | None = None
    group_number: str | None = None


class AuditMetadata(CamelModel):
    created_at: str | None = None
    created_by: str | None = None
    updated_at: str | None = None
    updated_by: str | None = None


# === Projections ===


class PatientListItem(CamelModel):
    """List-item shape served by /api/v1/patients and account search."""

    patient_key: str
    patient_id: str
    first_name: str
    last_name: str
    date_of_birth: str | None = None
    priority: str
    team: TeamOut | None = None
    primary_payer: PrimaryPayerOut | None = None
    last_order: LastOrderOut | None = None


class PatientSummary(CamelModel):
    """Legacy/search shape: US formatted dates, team name, payer block."""

    patient_id: str
    first_name: str
    last_name: str
    dob: str | None = None
    team: str | None = None
    is_pinned: bool
    last_order: dict[str, Any] | None = None
    payer: LegacyPayerOut | None = None


class PatientDetail(CamelModel):
    """Flat shape: stored fields passed through with nested objects parsed."""

    id: str
    guid: str | None = None
    first_name: str
    last_name: str
    date_of_birth: str | None = None
    gender: str | None = None
    phone: str | None = None
    email: str | None = None
    address: dict[str, Any] | None = None
    room_number: str | None = None
    bed_number: str | None = None
    admission_date: str | None = None
    discharge_date: str | None = None
    primary_physician: Any = None
    payer: str | None = None
    insurance: dict[str, Any] | None = None
    diagnosis_codes: list[str] | None = None
    status: str
    is_pinned: bool
    metadata: AuditMetadata | None = None
    team: dict[str, Any] | None = None
    agency: Any = None
    last_order: dict[str, Any] | None = None


# === Envelopes ===

ItemT = TypeVar("ItemT", bound=BaseModel)


class PatientPage(CamelModel, Generic[ItemT]):
    """Paginated listing."""

    items: list[ItemT]
    total_records: int
    page_no: int
    page_size: int
    pages_count: int


class AccountPatientPage(PatientPage[ItemT], Generic[ItemT]):
    """Paginated account search, echoing the account identifier."""

    ship_to_id: str


class PinUpdate(CamelModel):
    is_pinned: bool


class PinResult(CamelModel):
    status: str = "OK"
    is_pinned: bool


class BulkDeleteItem(CamelModel):
    key: str
    status: str


class BulkDeleteResponse(CamelModel):
    ship_to_id: str
    results: list[BulkDeleteItem]


class GenerateRequest(CamelModel):
    count: int = Field(default=DEFAULT_GENERATE_COUNT, description="Number of mock patients to generate (1-1000)")


class GenerateResponse(CamelModel):
    success: bool
    generated_count: int
    message: str


class ClearResponse(CamelModel):
    success: bool
    deleted_count: int
    message: str
