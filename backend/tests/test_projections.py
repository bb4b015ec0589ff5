"""Tests for the patient response projections."""

import pytest

from patientmock.models.patient import PatientRecord
from patientmock.projections import ProjectionRegistry, to_detail, to_list_item, to_summary
from patientmock.schemas.patient import PatientDetail, PatientListItem, PatientSummary

AUDIT = {
    "createdAt": "2024-01-01T00:00:00.000Z",
    "createdBy": "system",
    "updatedAt": "2024-01-01T00:00:00.000Z",
    "updatedBy": "system",
}


def make_record(**overrides) -> PatientRecord:
    values = {
        "id": "pt-1",
        "display_id": "10000001",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "date_of_birth": "1970-01-31",
        "status": "ACTIVE",
        "is_pinned": False,
        "audit": AUDIT,
    }
    values.update(overrides)
    return PatientRecord(**values)


class TestListItem:
    """Tests for the list-item shape."""

    def test_priority(self):
        assert to_list_item(make_record(is_pinned=True)).priority == "Pinned"
        assert to_list_item(make_record()).priority == "Normal"

    def test_keys(self):
        item = to_list_item(make_record())
        assert item.patient_key == "pt-1"
        assert item.patient_id == "10000001"

    def test_patient_id_falls_back_to_key(self):
        assert to_list_item(make_record(display_id=None)).patient_id == "pt-1"

    def test_missing_nested_objects_are_none(self):
        item = to_list_item(make_record())
        assert item.team is None
        assert item.primary_payer is None
        assert item.last_order is None

    def test_primary_payer_from_insurance(self):
        item = to_list_item(make_record(insurance={"providerName": "MockIns", "policyNumber": "P123"}))
        assert item.primary_payer.display_name == "MockIns"
        assert item.primary_payer.payer_id == "payer-unknown"
        assert item.primary_payer.payer_type == "Insurance"

    def test_primary_payer_from_stored_primary_payer(self):
        insurance = {"payerId": "payer-aetna", "payerType": "Agency", "displayName": "Aetna - PPO"}
        payer = to_list_item(make_record(insurance=insurance)).primary_payer
        assert payer.model_dump(by_alias=True) == insurance

    def test_primary_payer_from_label_only(self):
        payer = to_list_item(make_record(payer_type="Medicare")).primary_payer
        assert payer.payer_id == "payer-legacy"
        assert payer.display_name == "Medicare"

    def test_last_order_display_text(self):
        item = to_list_item(make_record(last_order={"orderNumber": 42, "status": "Shipped"}))
        assert item.last_order.order_number == "42"
        assert item.last_order.display_text == "42 - Shipped"

    def test_wire_names_are_camel_case(self):
        data = to_list_item(make_record(team={"teamId": "t1", "name": "Red"})).model_dump(by_alias=True)
        assert set(data) == {
            "patientKey",
            "patientId",
            "firstName",
            "lastName",
            "dateOfBirth",
            "priority",
            "team",
            "primaryPayer",
            "lastOrder",
        }
        assert data["team"] == {"teamId": "t1", "name": "Red"}


class TestSummary:
    """Tests for the legacy/search shape."""

    def test_dates_are_us_formatted(self):
        summary = to_summary(make_record(last_order={"orderNumber": "1", "orderDate": "2024-02-03"}))
        assert summary.dob == "01/31/1970"
        assert summary.last_order["orderDate"] == "02/03/2024"

    def test_non_iso_dates_pass_through(self):
        assert to_summary(make_record(date_of_birth="31.01.1970")).dob == "31.01.1970"

    def test_team_is_name(self):
        assert to_summary(make_record(team={"teamId": "t1", "name": "Red"})).team == "Red"

    def test_payer_block_from_insurance(self):
        summary = to_summary(
            make_record(insurance={"providerName": "Aetna", "policyNumber": "A1", "groupNumber": "G1"})
        )
        assert summary.payer.model_dump(by_alias=True) == {
            "payerTypeName": "Private Insurance/Self Pay",
            "planName": "Aetna",
            "planId": "A1",
            "groupNumber": "G1",
        }

    def test_no_payer_without_insurance(self):
        assert to_summary(make_record()).payer is None


class TestDetail:
    """Tests for the flat shape."""

    def test_passthrough(self):
        detail = to_detail(make_record(gender="FEMALE", diagnosis_codes=["E11.9"]))
        assert detail.id == "pt-1"
        assert detail.guid == "10000001"
        assert detail.gender == "FEMALE"
        assert detail.diagnosis_codes == ["E11.9"]
        assert detail.metadata.created_by == "system"


class TestRegistry:
    """Tests for the projection registry."""

    @pytest.mark.parametrize(
        "name,model",
        [("list_item", PatientListItem), ("summary", PatientSummary), ("detail", PatientDetail)],
    )
    def test_registered(self, name, model):
        assert ProjectionRegistry.get(name).model is model

    def test_unknown_projection(self):
        with pytest.raises(KeyError):
            ProjectionRegistry.get("nope")

    def test_projection_is_callable(self):
        assert isinstance(ProjectionRegistry.get("summary")(make_record()), PatientSummary)
