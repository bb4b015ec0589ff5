"""Partial-update merger for PATCH requests.

Each patchable field is an explicit entry mapping the accepted body keys
to a coercer that returns column updates. Entries are visited in a fixed
order; a field is touched when one of its keys is present in the body,
so an explicit ``null`` or ``false`` still applies.
"""

from dataclasses import dataclass
from typing import Any, Callable

from patientmock.exceptions import ValidationError
from patientmock.services.normalizer import (
    FieldError,
    coerce_bool,
    coerce_diagnosis_codes,
    coerce_email,
    coerce_gender,
    coerce_object,
    coerce_status,
    coerce_text,
    insurance_from_payer,
    is_blank,
    merge_audit,
    normalize_insurance,
    normalize_last_order,
    normalize_team,
)


@dataclass(frozen=True)
class PatchField:
    """Maps body keys to the column updates they produce.

    Args:
        keys: Accepted body keys; the first one present is used.
        apply: Turns the supplied value into ``{column: value}`` updates.
            Raises FieldError for invalid values.
    """

    keys: tuple[str, ...]
    apply: Callable[[Any], dict[str, Any]]

    def present_key(self, body: dict[str, Any]) -> str | None:
        for key in self.keys:
            if key in body:
                return key
        return None


def _column(column: str, coercer: Callable[[Any], Any] | None = None) -> Callable[[Any], dict[str, Any]]:
    def _apply(value: Any) -> dict[str, Any]:
        return {column: coercer(value) if coercer else value}

    return _apply


def _required_text(label: str) -> Callable[[Any], Any]:
    def _coerce(value: Any) -> Any:
        if is_blank(value):
            raise FieldError(f"{label} cannot be empty")
        return coerce_text(value)

    return _coerce


def _apply_payer(value: Any) -> dict[str, Any]:
    """``payer`` as an object sets the insurance structure and, when it
    carries one, the type label. A stored label is kept otherwise."""
    if value is None:
        return {"payer_type": None}
    if isinstance(value, str):
        return {"payer_type": value}
    if not isinstance(value, dict):
        raise FieldError("payer must be an object or a string")
    updates: dict[str, Any] = {"insurance": insurance_from_payer(value) or None}
    label = value.get("payerTypeName") or value.get("payerType")
    if label:
        updates["payer_type"] = label
    return updates


def _apply_insurance(value: Any) -> dict[str, Any]:
    if value is None:
        return {"insurance": None}
    if not isinstance(value, dict):
        raise FieldError("insurance must be an object")
    return {"insurance": normalize_insurance(value) or None}


PATCH_FIELDS: tuple[PatchField, ...] = (
    PatchField(("firstName",), _column("first_name", _required_text("firstName"))),
    PatchField(("lastName",), _column("last_name", _required_text("lastName"))),
    PatchField(("dateOfBirth", "dob"), _column("date_of_birth", coerce_text)),
    PatchField(("gender",), _column("gender", coerce_gender)),
    PatchField(("phone",), _column("phone", coerce_text)),
    PatchField(("email",), _column("email", coerce_email)),
    PatchField(("address",), _column("address", coerce_object("address"))),
    PatchField(("roomNumber",), _column("room_number", coerce_text)),
    PatchField(("bedNumber",), _column("bed_number", coerce_text)),
    PatchField(("admissionDate",), _column("admission_date", coerce_text)),
    PatchField(("dischargeDate",), _column("discharge_date", coerce_text)),
    PatchField(("primaryPhysician",), _column("primary_physician")),
    PatchField(("payer",), _apply_payer),
    PatchField(("insurance",), _apply_insurance),
    PatchField(("payerType",), _column("payer_type", coerce_text)),
    PatchField(("diagnosisCodes",), _column("diagnosis_codes", coerce_diagnosis_codes)),
    PatchField(("status",), _column("status", coerce_status)),
    PatchField(("isPinned",), _column("is_pinned", coerce_bool)),
    PatchField(("team", "teamName"), _column("team", normalize_team)),
    PatchField(("agency",), _column("agency")),
    PatchField(("lastOrder",), _column("last_order", normalize_last_order)),
)


def compute_patch(
    body: dict[str, Any],
    existing_audit: dict[str, Any] | None,
    identity: str,
    now: str,
) -> dict[str, Any]:
    """Compute the column updates for a PATCH body.

    Every supplied field is validated before any update is returned, so a
    rejected request changes nothing.

    Args:
        body: Partial request body.
        existing_audit: Stored metadata of the record being patched.
        identity: Caller identity recorded as updatedBy.
        now: Timestamp recorded as updatedAt.

    Returns:
        Mapping of PatientRecord attribute names to new values, always
        including the merged ``audit``.

    Raises:
        ValidationError: If a value is invalid or no updatable field was sent.
    """
    updates: dict[str, Any] = {}
    issues: list[str] = []

    for patch_field in PATCH_FIELDS:
        key = patch_field.present_key(body)
        if key is None:
            continue
        try:
            updates.update(patch_field.apply(body[key]))
        except FieldError as e:
            issues.append(str(e))

    if issues:
        raise ValidationError(issues)
    if not updates:
        raise ValidationError("No updatable fields provided")

    updates["audit"] = merge_audit(existing_audit, identity, now)
    return updates
