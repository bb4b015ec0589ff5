"""Patient service: the query and command operations behind every patients route.

Routers call these with the serving ``ApiVersion``; validation runs
before any store mutation and every successful write is committed here.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.constants import (
    DELETE_NOT_FOUND,
    DELETE_SUCCESS,
    GENERATOR_IDENTITY,
    MAX_GENERATE_COUNT,
    MIN_GENERATE_COUNT,
)
from patientmock.exceptions import ConflictError, NotFoundError, ValidationError
from patientmock.models.patient import PatientRecord
from patientmock.repositories.patient import PatientRepository
from patientmock.services.merger import compute_patch
from patientmock.services.mock_data import build_mock_patients
from patientmock.services.normalizer import merge_audit, normalize_create, normalize_replace
from patientmock.services.query_planner import QueryPlan, plan_query
from patientmock.utils.dates import utc_now_iso
from patientmock.versions import SEARCH_QUERY, ApiVersion, QueryProfile

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "Patient not found"


class PatientService:
    """Patient operations over a single database session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = PatientRepository(db)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def _page(
        self, params: Mapping[str, Any], profile: QueryProfile
    ) -> tuple[list[PatientRecord], int, QueryPlan]:
        plan = plan_query(params, profile)
        total = await self.repo.count(plan)
        records = await self.repo.scan(plan) if total else []
        return records, total, plan

    async def list_patients(
        self, params: Mapping[str, Any], version: ApiVersion
    ) -> tuple[list[PatientRecord], int, QueryPlan]:
        """List one page of patients under the version's query rules.

        Returns:
            Tuple of (page records, total matching records, plan).

        Raises:
            ValidationError: If the version is strict and a parameter is invalid.
        """
        return await self._page(params, version.query)

    async def search_patients(
        self, ship_to_id: str, params: Mapping[str, Any]
    ) -> tuple[list[PatientRecord], int, QueryPlan]:
        """Account-scoped search. The account id is accepted but does not filter."""
        logger.debug("Searching patients for account %s", ship_to_id)
        return await self._page(params, SEARCH_QUERY)

    async def get_patient(self, key: str) -> PatientRecord:
        """Get a patient by key.

        Raises:
            NotFoundError: If no patient has this key.
        """
        record = await self.repo.get(key)
        if record is None:
            raise NotFoundError(PATIENT_NOT_FOUND)
        return record

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_patient(
        self, body: dict[str, Any], version: ApiVersion, identity: str
    ) -> PatientRecord:
        """Create a patient from a request body.

        Raises:
            ValidationError: If required fields are missing or malformed.
            ConflictError: If the key is taken or belonged to a deleted
                patient, or the version rejects
                duplicate name and date of birth and one exists.
        """
        values = normalize_create(body, version, identity, utc_now_iso())

        if await self.repo.exists(values["id"]) or await self.repo.is_retired(values["id"]):
            raise ConflictError(f"Patient {values['id']} already exists")

        if version.reject_duplicate_demographics:
            duplicate = await self.repo.find_by_demographics(
                values.get("first_name"), values.get("last_name"), values.get("date_of_birth")
            )
            if duplicate is not None:
                raise ConflictError(
                    "Patient with the same name and date of birth already exists",
                    error_code="DUP_DEMOGRAPHICS",
                )

        try:
            record = await self.repo.insert(values)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"Patient {values['id']} already exists") from e

        logger.info("Created patient %s via %s API (by %s)", record.id, version.name, identity)
        return record

    async def replace_patient(
        self, key: str, body: dict[str, Any], version: ApiVersion, identity: str
    ) -> PatientRecord:
        """Replace every mutable field of a patient (PUT).

        Raises:
            NotFoundError: If no patient has this key.
            ValidationError: If required fields are missing or malformed.
        """
        record = await self.get_patient(key)
        values = normalize_replace(body, version, record.audit, identity, utc_now_iso())
        await self.repo.update(record, values)
        await self.db.commit()
        return record

    async def patch_patient(self, key: str, body: dict[str, Any], identity: str) -> PatientRecord:
        """Apply only the fields present in ``body`` (PATCH).

        Raises:
            NotFoundError: If no patient has this key.
            ValidationError: If a value is invalid or nothing updatable was sent.
        """
        record = await self.get_patient(key)
        updates = compute_patch(body, record.audit, identity, utc_now_iso())
        await self.repo.update(record, updates)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def set_pinned(self, key: str, is_pinned: bool, identity: str) -> PatientRecord:
        """Pin or unpin a patient, refreshing the update stamp.

        Raises:
            NotFoundError: If no patient has this key.
        """
        record = await self.get_patient(key)
        await self.repo.update(
            record,
            {"is_pinned": is_pinned, "audit": merge_audit(record.audit, identity, utc_now_iso())},
        )
        await self.db.commit()
        return record

    async def delete_patient(self, key: str) -> None:
        """Delete a patient.

        Raises:
            NotFoundError: If no patient has this key.
        """
        if not await self.repo.delete(key):
            raise NotFoundError(PATIENT_NOT_FOUND)
        await self.db.commit()
        logger.info("Deleted patient %s", key)

    async def delete_patients(self, ship_to_id: str, keys: list[str]) -> list[dict[str, str]]:
        """Delete each key independently and report a status per key.

        Missing keys are reported as NOT_FOUND instead of failing the batch.
        """
        results = []
        for key in keys:
            deleted = await self.repo.delete(key)
            results.append({"key": key, "status": DELETE_SUCCESS if deleted else DELETE_NOT_FOUND})
        await self.db.commit()

        removed = sum(1 for result in results if result["status"] == DELETE_SUCCESS)
        logger.info("Bulk delete for account %s: %d of %d removed", ship_to_id, removed, len(keys))
        return results

    # -------------------------------------------------------------------------
    # Admin utilities
    # -------------------------------------------------------------------------

    async def clear_patients(self) -> int:
        """Delete every patient and return how many were removed."""
        deleted = await self.repo.delete_all()
        await self.db.commit()
        logger.info("Cleared %d patients", deleted)
        return deleted

    async def generate_patients(self, count: int) -> int:
        """Insert ``count`` random patients.

        Generated keys that collide with stored or deleted ones are
        skipped, so the returned count can be lower than requested.

        Raises:
            ValidationError: If count is outside the allowed range.
        """
        if not MIN_GENERATE_COUNT <= count <= MAX_GENERATE_COUNT:
            raise ValidationError(
                message=f"Count must be between {MIN_GENERATE_COUNT} and {MAX_GENERATE_COUNT}"
            )

        generated = 0
        for values in build_mock_patients(count, GENERATOR_IDENTITY, utc_now_iso()):
            if await self.repo.exists(values["id"]) or await self.repo.is_retired(values["id"]):
                continue
            await self.repo.insert(values)
            generated += 1
        await self.db.commit()

        logger.info("Generated %d mock patients", generated)
        return generated
