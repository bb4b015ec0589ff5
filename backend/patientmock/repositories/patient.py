"""Patient repository.

Thin data-access layer over the ``patients`` table. Deleting a record
leaves its key in ``deleted_patient_keys`` so it is never reused.
Callers own the transaction: nothing here commits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.models.patient import DeletedPatientKey, PatientRecord
from patientmock.utils.dates import utc_now_iso

if TYPE_CHECKING:
    from patientmock.services.query_planner import QueryPlan


class PatientRepository:
    """Repository for stored patient records."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: Async SQLAlchemy session.
        """
        self.db = db

    async def insert(self, values: dict[str, Any]) -> PatientRecord:
        """Insert a new record built from normalized column values.

        Raises:
            sqlalchemy.exc.IntegrityError: If the key is already taken.
        """
        record = PatientRecord(**values)
        self.db.add(record)
        await self.db.flush()
        return record

    async def get(self, key: str) -> PatientRecord | None:
        """Get a record by key."""
        return await self.db.get(PatientRecord, key)

    async def exists(self, key: str) -> bool:
        result = await self.db.execute(select(PatientRecord.id).where(PatientRecord.id == key))
        return result.scalar_one_or_none() is not None

    async def is_retired(self, key: str) -> bool:
        """True if a record with this key existed and was deleted."""
        return await self.db.get(DeletedPatientKey, key) is not None

    async def find_by_demographics(
        self,
        first_name: str | None,
        last_name: str | None,
        date_of_birth: str | None,
    ) -> PatientRecord | None:
        """Find a record with the same name and date of birth (case-insensitive names)."""
        if not first_name or not last_name or not date_of_birth:
            return None
        result = await self.db.execute(
            select(PatientRecord)
            .where(
                func.lower(PatientRecord.first_name) == first_name.lower(),
                func.lower(PatientRecord.last_name) == last_name.lower(),
                PatientRecord.date_of_birth == date_of_birth,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count(self, plan: QueryPlan) -> int:
        """Count records matching the plan's filters."""
        result = await self.db.execute(
            select(func.count()).select_from(PatientRecord).where(*plan.filters)
        )
        return result.scalar() or 0

    async def scan(self, plan: QueryPlan) -> list[PatientRecord]:
        """Fetch one page of records in the plan's order."""
        result = await self.db.execute(
            select(PatientRecord)
            .where(*plan.filters)
            .order_by(*plan.order_by())
            .offset(plan.offset)
            .limit(plan.page_size)
        )
        return list(result.scalars().all())

    async def update(self, record: PatientRecord, values: dict[str, Any]) -> PatientRecord:
        """Apply column updates to a loaded record."""
        for attribute, value in values.items():
            setattr(record, attribute, value)
        await self.db.flush()
        return record

    async def delete(self, key: str) -> bool:
        """Delete a record.

        Returns:
            True if a record was removed, False if none matched.
        """
        result = await self.db.execute(delete(PatientRecord).where(PatientRecord.id == key))
        if result.rowcount > 0:
            await self._retire([key])
            return True
        return False

    async def delete_all(self) -> int:
        """Delete every record and return how many were removed."""
        keys = list((await self.db.execute(select(PatientRecord.id))).scalars().all())
        await self._retire(keys)
        result = await self.db.execute(delete(PatientRecord))
        return result.rowcount or 0

    async def _retire(self, keys: list[str]) -> None:
        if not keys:
            return
        deleted_at = utc_now_iso()
        await self.db.execute(
            sqlite_insert(DeletedPatientKey.__table__).on_conflict_do_nothing(),
            [{"id": key, "deletedAt": deleted_at} for key in keys],
        )
