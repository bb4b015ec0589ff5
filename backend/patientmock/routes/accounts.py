"""Account-scoped patient routes: search and bulk delete.

The account (ship-to) id is echoed back but does not filter records.
"""

import asyncio

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.config import settings
from patientmock.database import get_db
from patientmock.projections import ProjectionRegistry
from patientmock.routes.patients import list_query_params
from patientmock.schemas.patient import (
    AccountPatientPage,
    BulkDeleteItem,
    BulkDeleteResponse,
    PatientListItem,
)
from patientmock.services.patients import PatientService

router = APIRouter(prefix="/api/v1/accounts", tags=["accounts"])

_list_item = ProjectionRegistry.get("list_item")


@router.get("/{ship_to_id}/patients", response_model=AccountPatientPage[PatientListItem])
async def search_patients(
    ship_to_id: str,
    params: dict[str, str | None] = Depends(list_query_params),
    db: AsyncSession = Depends(get_db),
) -> AccountPatientPage[PatientListItem]:
    """Search an account's patients.

    Query parameters are validated strictly: a bad pageNo, pageSize or
    sortBy is a 400 rather than being clamped.

    Args:
        ship_to_id: Account identifier, echoed in the response.
    """
    if settings.search_delay_ms > 0:
        await asyncio.sleep(settings.search_delay_ms / 1000)

    records, total, plan = await PatientService(db).search_patients(ship_to_id, params)
    return AccountPatientPage[PatientListItem](
        ship_to_id=ship_to_id,
        items=[_list_item(record) for record in records],
        total_records=total,
        page_no=plan.page_no,
        page_size=plan.page_size,
        pages_count=plan.pages_count(total),
    )


@router.delete("/{ship_to_id}/patients", response_model=BulkDeleteResponse)
async def delete_patients(
    ship_to_id: str,
    patient_keys: list[str] = Query(..., alias="patientKeys"),
    db: AsyncSession = Depends(get_db),
) -> BulkDeleteResponse:
    """Delete several patients, reporting SUCCESS or NOT_FOUND per key.

    Args:
        ship_to_id: Account identifier, echoed in the response.
        patient_keys: Keys to delete (repeat ``patientKeys`` per key).
    """
    results = await PatientService(db).delete_patients(ship_to_id, patient_keys)
    return BulkDeleteResponse(
        ship_to_id=ship_to_id,
        results=[BulkDeleteItem(**result) for result in results],
    )
