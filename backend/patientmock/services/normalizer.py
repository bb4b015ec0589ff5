"""Normalizer: inbound patient payloads to canonical column values.

Request bodies arrive in several overlapping dialects (``payer`` vs
``insurance``, ``team`` as a string or an object, ``dob`` vs
``dateOfBirth``). Everything here converts them into the attribute
values of ``PatientRecord``. Field level coercers are shared with the
PATCH merger so both paths accept the same shapes.
"""

import re
import uuid
from typing import Any

from patientmock.constants import DEFAULT_STATUS, GENDERS, STATUSES
from patientmock.exceptions import ValidationError
from patientmock.versions import ApiVersion

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


class FieldError(ValueError):
    """A single field failed a format or enum check."""


# =============================================================================
# Field coercers
# =============================================================================


def is_blank(value: Any) -> bool:
    """True for values that do not satisfy a required field."""
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, dict):
        return not value
    return value is None


def coerce_text(value: Any) -> str | None:
    """Scalar text column value; empty strings are stored as NULL."""
    if is_blank(value):
        return None
    if isinstance(value, (dict, list)):
        raise FieldError("Expected a text value")
    return str(value)


def coerce_gender(value: Any) -> str | None:
    if value is None:
        return None
    if value not in GENDERS:
        raise FieldError("Invalid gender")
    return value


def coerce_status(value: Any) -> str:
    if value not in STATUSES:
        raise FieldError("Invalid status")
    return value


def coerce_email(value: Any) -> str | None:
    if is_blank(value):
        return None
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        raise FieldError("Invalid email format")
    return value


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def coerce_diagnosis_codes(value: Any) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise FieldError("diagnosisCodes must be an array")
    return [str(code) for code in value]


def coerce_object(name: str) -> Any:
    """Build a coercer for an opaque nested object (address, agency, ...)."""

    def _coerce(value: Any) -> dict[str, Any] | None:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise FieldError(f"{name} must be an object")
        return value

    return _coerce


def synthesize_team_id(name: str) -> str:
    """Derive a stable team id from a team name (``Red Team`` -> ``team-red-team``)."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"team-{slug or 'unassigned'}"


def normalize_team(value: Any) -> dict[str, Any] | None:
    """Normalize a team given as a bare name or an object to ``{teamId, name}``."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return {"teamId": synthesize_team_id(value), "name": value}
    if not isinstance(value, dict):
        raise FieldError("team must be a string or an object")

    name = value.get("name") or value.get("teamName")
    team_id = value.get("teamId") or value.get("id")
    if not team_id and not name:
        raise FieldError("team requires a name or teamId")
    return {"teamId": team_id or synthesize_team_id(name), "name": name}


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def insurance_from_payer(payer: dict[str, Any]) -> dict[str, Any]:
    """Convert a ``payer`` object to the stored insurance structure.

    ``{payerTypeName, planName, planId, groupNumber}`` maps onto
    ``{providerName, policyNumber, groupNumber}``; primaryPayer style keys
    (``payerId``, ``payerType``, ``displayName``) are carried through.
    """
    plan_name = payer.get("planName") or payer.get("displayName")
    return _compact(
        {
            "providerName": plan_name,
            "policyNumber": payer.get("planId"),
            "groupNumber": payer.get("groupNumber"),
            "payerId": payer.get("payerId"),
            "payerType": payer.get("payerType") or payer.get("payerTypeName"),
            "displayName": payer.get("displayName"),
        }
    )


def normalize_insurance(insurance: dict[str, Any]) -> dict[str, Any]:
    """Fill the provider name from a primaryPayer ``displayName`` when missing."""
    normalized = dict(insurance)
    if not normalized.get("providerName") and normalized.get("displayName"):
        normalized["providerName"] = normalized["displayName"]
    return _compact(normalized)


def payer_type_of(payer: Any, insurance: dict[str, Any] | None) -> str | None:
    """Pick the short payer type label from whichever shape supplied one."""
    if isinstance(payer, str):
        return payer or None
    if isinstance(payer, dict):
        label = payer.get("payerTypeName") or payer.get("payerType")
        if label:
            return label
    if insurance:
        return insurance.get("payerType")
    return None


def normalize_payment(payer: Any, insurance: Any) -> dict[str, Any]:
    """Resolve ``payer``/``insurance`` into ``insurance`` and ``payer_type`` values.

    An explicit ``insurance`` object wins for the stored structure; a
    ``payer`` object is converted when it is the only one supplied. A
    bare string ``payer`` is only a type label.
    """
    if insurance is not None and not isinstance(insurance, dict):
        raise FieldError("insurance must be an object")
    if payer is not None and not isinstance(payer, (dict, str)):
        raise FieldError("payer must be an object or a string")

    stored: dict[str, Any] | None = None
    if isinstance(insurance, dict):
        stored = normalize_insurance(insurance)
    elif isinstance(payer, dict):
        stored = insurance_from_payer(payer)

    return {"insurance": stored or None, "payer_type": payer_type_of(payer, stored)}


def normalize_last_order(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise FieldError("lastOrder must be an object")
    return value


def first_present(body: dict[str, Any], *keys: str) -> Any:
    """Value of the first key present in ``body`` (presence, not truthiness)."""
    for key in keys:
        if key in body:
            return body[key]
    return None


def first_filled(body: dict[str, Any], *keys: str) -> Any:
    """Value of the first key in ``body`` that is not blank."""
    for key in keys:
        if not is_blank(body.get(key)):
            return body[key]
    return None


# =============================================================================
# Whole-body normalization
# =============================================================================


def missing_required(body: dict[str, Any], groups: tuple[tuple[str, ...], ...]) -> list[str]:
    """Issues for every required group with no non-empty alternative."""
    issues = []
    for group in groups:
        if all(is_blank(body.get(key)) for key in group):
            issues.append(f"{group[0]} is required")
    return issues


def normalize_fields(body: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Convert every mutable field of ``body`` to column values.

    Omitted fields come back as ``None`` (or their default), which is
    what a full replace needs. Identity and audit columns are not set.

    Returns:
        Tuple of (column values, issues).
    """
    issues: list[str] = []
    values: dict[str, Any] = {}

    def apply(column: str, coercer, raw: Any) -> None:
        try:
            values[column] = coercer(raw)
        except FieldError as e:
            issues.append(str(e))

    apply("first_name", coerce_text, body.get("firstName"))
    apply("last_name", coerce_text, body.get("lastName"))
    apply("date_of_birth", coerce_text, first_present(body, "dateOfBirth", "dob"))
    apply("gender", coerce_gender, body.get("gender"))
    apply("phone", coerce_text, body.get("phone"))
    apply("email", coerce_email, body.get("email"))
    apply("address", coerce_object("address"), body.get("address") or None)
    apply("room_number", coerce_text, body.get("roomNumber"))
    apply("bed_number", coerce_text, body.get("bedNumber"))
    apply("admission_date", coerce_text, body.get("admissionDate"))
    apply("discharge_date", coerce_text, body.get("dischargeDate"))
    values["primary_physician"] = body.get("primaryPhysician") or None
    apply("diagnosis_codes", coerce_diagnosis_codes, body.get("diagnosisCodes"))

    try:
        values.update(normalize_payment(body.get("payer"), body.get("insurance")))
    except FieldError as e:
        issues.append(str(e))
    if not values.get("payer_type") and isinstance(body.get("payerType"), str):
        values["payer_type"] = body["payerType"]

    status_value = body.get("status")
    apply("status", coerce_status, status_value if status_value is not None else DEFAULT_STATUS)
    values["is_pinned"] = coerce_bool(body.get("isPinned", False))
    apply("team", normalize_team, first_present(body, "team", "teamName"))
    apply("agency", coerce_object("agency"), body.get("agency") or None)
    apply("last_order", normalize_last_order, body.get("lastOrder"))

    return values, issues


def display_id_of(body: dict[str, Any]) -> str | None:
    """Secondary human-facing id, when the caller sent one separately."""
    value = first_filled(body, "displayId", "guid")
    return str(value) if value is not None else None


def new_audit(identity: str, now: str) -> dict[str, str]:
    return {
        "createdAt": now,
        "createdBy": identity,
        "updatedAt": now,
        "updatedBy": identity,
    }


def normalize_create(
    body: dict[str, Any],
    version: ApiVersion,
    identity: str,
    now: str,
) -> dict[str, Any]:
    """Build a fully populated record for a create request.

    A caller supplied ``patientId``/``id`` becomes the record key;
    otherwise a fresh UUID is generated. The display id defaults to the
    key.

    Raises:
        ValidationError: With every issue found, before anything is stored.
    """
    issues = missing_required(body, version.create_required)
    values, field_issues = normalize_fields(body)
    issues.extend(field_issues)
    if issues:
        raise ValidationError(issues)

    supplied_key = first_filled(body, "patientId", "id")
    key = str(supplied_key) if supplied_key is not None else str(uuid.uuid4())

    values["id"] = key
    values["display_id"] = display_id_of(body) or key
    values["audit"] = new_audit(identity, now)
    return values


def normalize_replace(
    body: dict[str, Any],
    version: ApiVersion,
    existing_audit: dict[str, Any] | None,
    identity: str,
    now: str,
) -> dict[str, Any]:
    """Build the column values for a full replace (PUT).

    Every mutable field is overwritten; the key never changes and
    ``createdAt``/``createdBy`` are carried over from the stored record.

    Raises:
        ValidationError: If required fields are missing or malformed.
    """
    issues = missing_required(body, version.replace_required)
    values, field_issues = normalize_fields(body)
    issues.extend(field_issues)
    if issues:
        raise ValidationError(issues)

    display_id = display_id_of(body)
    if display_id:
        values["display_id"] = display_id
    values["audit"] = merge_audit(existing_audit, identity, now)
    return values


def merge_audit(existing: dict[str, Any] | None, identity: str, now: str) -> dict[str, Any]:
    """Refresh updatedAt/updatedBy while keeping the creation stamp."""
    existing = existing or {}
    return {
        "createdAt": existing.get("createdAt") or now,
        "createdBy": existing.get("createdBy") or identity,
        "updatedAt": now,
        "updatedBy": identity,
    }
