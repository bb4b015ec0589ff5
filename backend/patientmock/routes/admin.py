"""Admin utility routes for resetting and seeding mock data."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.constants import DEFAULT_GENERATE_COUNT
from patientmock.database import get_db
from patientmock.schemas.patient import ClearResponse, GenerateRequest, GenerateResponse
from patientmock.services.patients import PatientService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.delete("/clear", response_model=ClearResponse)
async def clear_patients(db: AsyncSession = Depends(get_db)) -> ClearResponse:
    """Delete every patient."""
    deleted = await PatientService(db).clear_patients()
    return ClearResponse(
        success=True,
        deleted_count=deleted,
        message=f"Deleted {deleted} patient(s)",
    )


@router.post("/generate", response_model=GenerateResponse)
async def generate_patients(
    request: GenerateRequest | None = None,
    db: AsyncSession = Depends(get_db),
) -> GenerateResponse:
    """Generate random mock patients.

    Raises:
        ValidationError: If count is outside 1..1000.
    """
    count = request.count if request else DEFAULT_GENERATE_COUNT
    generated = await PatientService(db).generate_patients(count)
    return GenerateResponse(
        success=True,
        generated_count=generated,
        message=f"Generated {generated} patient(s)",
    )
