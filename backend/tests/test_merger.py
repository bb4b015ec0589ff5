"""Tests for PATCH merging."""

import pytest

from patientmock.exceptions import ValidationError
from patientmock.services.merger import PATCH_FIELDS, compute_patch

CREATED = {
    "createdAt": "2024-01-01T00:00:00.000Z",
    "createdBy": "alice",
    "updatedAt": "2024-01-01T00:00:00.000Z",
    "updatedBy": "alice",
}
NOW = "2024-03-01T00:00:00.000Z"


class TestPresenceSemantics:
    """A field is touched when its key is present, whatever the value."""

    def test_false_is_applied(self):
        updates = compute_patch({"isPinned": False}, CREATED, "bob", NOW)
        assert updates["is_pinned"] is False

    def test_null_clears_optional_field(self):
        updates = compute_patch({"phone": None, "team": None}, CREATED, "bob", NOW)
        assert updates["phone"] is None
        assert updates["team"] is None

    def test_only_supplied_fields_are_returned(self):
        updates = compute_patch({"email": "a@b.co"}, CREATED, "bob", NOW)
        assert set(updates) == {"email", "audit"}

    def test_unknown_keys_are_ignored(self):
        with pytest.raises(ValidationError) as exc_info:
            compute_patch({"id": "other", "createdAt": "x"}, CREATED, "bob", NOW)
        assert exc_info.value.issues == ["No updatable fields provided"]

    def test_empty_body_is_rejected(self):
        with pytest.raises(ValidationError):
            compute_patch({}, CREATED, "bob", NOW)


class TestValidation:
    """Invalid values reject the whole patch."""

    def test_invalid_gender(self):
        with pytest.raises(ValidationError) as exc_info:
            compute_patch({"gender": "UNKNOWN", "phone": "555"}, CREATED, "bob", NOW)
        assert exc_info.value.issues == ["Invalid gender"]

    def test_invalid_status(self):
        with pytest.raises(ValidationError) as exc_info:
            compute_patch({"status": "GONE"}, CREATED, "bob", NOW)
        assert exc_info.value.issues == ["Invalid status"]

    def test_required_name_cannot_be_cleared(self):
        with pytest.raises(ValidationError) as exc_info:
            compute_patch({"firstName": ""}, CREATED, "bob", NOW)
        assert exc_info.value.issues == ["firstName cannot be empty"]


class TestNestedFields:
    """Tests for payer, insurance and team patches."""

    def test_payer_object_sets_insurance_and_label(self):
        updates = compute_patch({"payer": {"payerTypeName": "Medicaid", "planName": "State"}}, CREATED, "bob", NOW)
        assert updates["insurance"]["providerName"] == "State"
        assert updates["payer_type"] == "Medicaid"

    def test_payer_object_without_label_keeps_stored_label(self):
        updates = compute_patch({"payer": {"planName": "X"}}, CREATED, "bob", NOW)
        assert updates["insurance"] == {"providerName": "X"}
        assert "payer_type" not in updates

    def test_payer_string_only_sets_label(self):
        updates = compute_patch({"payer": "Medicare"}, CREATED, "bob", NOW)
        assert updates["payer_type"] == "Medicare"
        assert "insurance" not in updates

    def test_team_name_alias(self):
        updates = compute_patch({"teamName": "Green Team"}, CREATED, "bob", NOW)
        assert updates["team"] == {"teamId": "team-green-team", "name": "Green Team"}


class TestAudit:
    """The creation stamp survives every patch."""

    def test_created_fields_preserved(self):
        updates = compute_patch({"isPinned": True}, CREATED, "bob", NOW)
        assert updates["audit"]["createdAt"] == CREATED["createdAt"]
        assert updates["audit"]["createdBy"] == "alice"
        assert updates["audit"]["updatedAt"] == NOW
        assert updates["audit"]["updatedBy"] == "bob"

    def test_field_table_has_no_duplicate_keys(self):
        keys = [key for field in PATCH_FIELDS for key in field.keys]
        assert len(keys) == len(set(keys))
