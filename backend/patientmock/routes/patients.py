"""Patient API routes.

One router is built per ``ApiVersion``. Every version exposes the same
operations; the version decides required fields, query rules and which
projection shapes the response.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.auth import get_identity
from patientmock.database import get_db
from patientmock.projections import ProjectionRegistry
from patientmock.schemas.patient import PatientPage, PinResult, PinUpdate
from patientmock.services.patients import PatientService
from patientmock.versions import API_VERSIONS, ApiVersion


async def list_query_params(
    q: str | None = Query(None, description="Free-text search over name, patient id and email"),
    page_no: str | None = Query(None, alias="pageNo"),
    page_size: str | None = Query(None, alias="pageSize"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_direction: str | None = Query(None, alias="sortDirection"),
    sort_method: str | None = Query(None, alias="sortMethod"),
    is_pinned: str | None = Query(None, alias="isPinned"),
    patient_status: str | None = Query(None, alias="status"),
) -> dict[str, str | None]:
    """Collect list/search parameters as raw strings for the query planner."""
    return {
        "q": q,
        "pageNo": page_no,
        "pageSize": page_size,
        "sortBy": sort_by,
        "sortDirection": sort_direction,
        "sortMethod": sort_method,
        "isPinned": is_pinned,
        "status": patient_status,
    }


def build_patient_router(version: ApiVersion) -> APIRouter:
    """Build the CRUD router for one API version.

    Args:
        version: Version configuration (prefix, required fields, query
            profile and projection name).

    Returns:
        Router mounted at ``version.prefix``.
    """
    router = APIRouter(prefix=version.prefix, tags=version.tags)
    projection = ProjectionRegistry.get(version.projection)
    item_model = projection.model
    page_model = PatientPage[item_model]

    @router.get(
        "",
        response_model=page_model,
        response_model_exclude_none=projection.exclude_none,
        name=f"{version.name}_list_patients",
    )
    async def list_patients(
        params: dict[str, str | None] = Depends(list_query_params),
        db: AsyncSession = Depends(get_db),
    ):
        """List patients with search, sorting and pagination."""
        records, total, plan = await PatientService(db).list_patients(params, version)
        return page_model(
            items=[projection(record) for record in records],
            total_records=total,
            page_no=plan.page_no,
            page_size=plan.page_size,
            pages_count=plan.pages_count(total),
        )

    @router.get(
        "/{key}",
        response_model=item_model,
        response_model_exclude_none=projection.exclude_none,
        name=f"{version.name}_get_patient",
    )
    async def get_patient(key: str, db: AsyncSession = Depends(get_db)):
        """Get a single patient by key.

        Raises:
            NotFoundError: If no patient has this key.
        """
        return projection(await PatientService(db).get_patient(key))

    @router.post(
        "",
        response_model=item_model,
        response_model_exclude_none=projection.exclude_none,
        status_code=status.HTTP_201_CREATED,
        name=f"{version.name}_create_patient",
    )
    async def create_patient(
        response: Response,
        body: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
        identity: str = Depends(get_identity),
    ):
        """Create a patient.

        Returns:
            The created patient, with a Location header pointing at it.

        Raises:
            ValidationError: If required fields are missing or malformed.
            ConflictError: If the key or the demographics are already taken.
        """
        record = await PatientService(db).create_patient(body, version, identity)
        response.headers["Location"] = f"{version.prefix}/{record.id}"
        return projection(record)

    @router.put(
        "/{key}",
        response_model=item_model,
        response_model_exclude_none=projection.exclude_none,
        name=f"{version.name}_replace_patient",
    )
    async def replace_patient(
        key: str,
        body: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
        identity: str = Depends(get_identity),
    ):
        """Replace all mutable fields of a patient."""
        record = await PatientService(db).replace_patient(key, body, version, identity)
        return projection(record)

    @router.patch(
        "/{key}",
        response_model=item_model,
        response_model_exclude_none=projection.exclude_none,
        name=f"{version.name}_patch_patient",
    )
    async def patch_patient(
        key: str,
        body: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
        identity: str = Depends(get_identity),
    ):
        """Update only the fields present in the body."""
        record = await PatientService(db).patch_patient(key, body, identity)
        return projection(record)

    @router.delete(
        "/{key}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"{version.name}_delete_patient",
    )
    async def delete_patient(key: str, db: AsyncSession = Depends(get_db)) -> Response:
        """Delete a patient."""
        await PatientService(db).delete_patient(key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.put("/{key}/pin", response_model=PinResult, name=f"{version.name}_pin_patient")
    async def pin_patient(
        key: str,
        pin: PinUpdate,
        db: AsyncSession = Depends(get_db),
        identity: str = Depends(get_identity),
    ) -> PinResult:
        """Pin or unpin a patient."""
        record = await PatientService(db).set_pinned(key, pin.is_pinned, identity)
        return PinResult(is_pinned=record.is_pinned)

    return router


routers = [build_patient_router(version) for version in API_VERSIONS]
