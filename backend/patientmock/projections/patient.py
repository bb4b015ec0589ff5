"""Patient projectors.

Pure functions from a stored ``PatientRecord`` to one of the public
response shapes. Missing nested objects project as ``None``; the only
invented values are the documented placeholders of the primaryPayer
shape (``payer-unknown``, ``payer-legacy``).
"""

from typing import Any

from patientmock.constants import (
    DEFAULT_PAYER_TYPE,
    DEFAULT_PAYER_TYPE_NAME,
    LEGACY_PAYER_ID,
    PRIORITY_NORMAL,
    PRIORITY_PINNED,
    UNKNOWN_PAYER_ID,
)
from patientmock.models.patient import PatientRecord
from patientmock.schemas.patient import (
    AuditMetadata,
    LastOrderOut,
    LegacyPayerOut,
    PatientDetail,
    PatientListItem,
    PatientSummary,
    PrimaryPayerOut,
    TeamOut,
)
from patientmock.utils.dates import to_us_date


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def project_team(team: Any) -> TeamOut | None:
    if not isinstance(team, dict):
        return None
    return TeamOut(
        team_id=_text(team.get("teamId") or team.get("id")),
        name=_text(team.get("name")),
    )


def project_primary_payer(record: PatientRecord) -> PrimaryPayerOut | None:
    """primaryPayer from stored insurance, else from the bare payer label."""
    insurance = record.insurance
    if isinstance(insurance, dict) and insurance:
        return PrimaryPayerOut(
            payer_id=str(insurance.get("payerId") or UNKNOWN_PAYER_ID),
            payer_type=str(insurance.get("payerType") or record.payer_type or DEFAULT_PAYER_TYPE),
            display_name=str(insurance.get("displayName") or insurance.get("providerName") or "Unknown"),
        )
    if record.payer_type:
        return PrimaryPayerOut(
            payer_id=LEGACY_PAYER_ID,
            payer_type=DEFAULT_PAYER_TYPE,
            display_name=record.payer_type,
        )
    return None


def project_last_order(last_order: Any) -> LastOrderOut | None:
    if not isinstance(last_order, dict):
        return None
    number = last_order.get("orderNumber") or last_order.get("id")
    status = last_order.get("status")
    display_text = last_order.get("displayText") or f"{number} - {status}"
    return LastOrderOut(
        order_number=_text(number),
        status=_text(status),
        order_date=_text(last_order.get("orderDate") or last_order.get("date")),
        display_text=display_text,
    )


def project_legacy_payer(record: PatientRecord) -> LegacyPayerOut | None:
    insurance = record.insurance
    if not isinstance(insurance, dict) or not insurance:
        return None
    return LegacyPayerOut(
        payer_type_name=str(record.payer_type or insurance.get("payerType") or DEFAULT_PAYER_TYPE_NAME),
        plan_name=str(insurance.get("providerName") or insurance.get("displayName") or "Unknown"),
        plan_id=_text(insurance.get("policyNumber")),
        group_number=_text(insurance.get("groupNumber")),
    )


def project_legacy_last_order(last_order: Any) -> dict[str, Any] | None:
    """Copy of lastOrder with its date fields in ``MM/DD/YYYY``."""
    if not isinstance(last_order, dict):
        return None
    order = dict(last_order)
    for key in ("orderDate", "date"):
        if key in order:
            order[key] = to_us_date(order[key])
    return order


def to_list_item(record: PatientRecord) -> PatientListItem:
    return PatientListItem(
        patient_key=record.id,
        patient_id=record.display_id or record.id,
        first_name=record.first_name,
        last_name=record.last_name,
        date_of_birth=record.date_of_birth,
        priority=PRIORITY_PINNED if record.is_pinned else PRIORITY_NORMAL,
        team=project_team(record.team),
        primary_payer=project_primary_payer(record),
        last_order=project_last_order(record.last_order),
    )


def to_summary(record: PatientRecord) -> PatientSummary:
    team = record.team.get("name") if isinstance(record.team, dict) else record.team
    return PatientSummary(
        patient_id=record.id,
        first_name=record.first_name,
        last_name=record.last_name,
        dob=to_us_date(record.date_of_birth),
        team=_text(team),
        is_pinned=bool(record.is_pinned),
        last_order=project_legacy_last_order(record.last_order),
        payer=project_legacy_payer(record),
    )


def to_detail(record: PatientRecord) -> PatientDetail:
    return PatientDetail(
        id=record.id,
        guid=record.display_id,
        first_name=record.first_name,
        last_name=record.last_name,
        date_of_birth=record.date_of_birth,
        gender=record.gender,
        phone=record.phone,
        email=record.email,
        address=record.address,
        room_number=record.room_number,
        bed_number=record.bed_number,
        admission_date=record.admission_date,
        discharge_date=record.discharge_date,
        primary_physician=record.primary_physician,
        payer=record.payer_type,
        insurance=record.insurance,
        diagnosis_codes=record.diagnosis_codes,
        status=record.status,
        is_pinned=bool(record.is_pinned),
        metadata=AuditMetadata.model_validate(record.audit) if record.audit else None,
        team=record.team,
        agency=record.agency,
        last_order=record.last_order,
    )
