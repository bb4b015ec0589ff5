"""Pydantic schemas for API request/response models."""

from patientmock.schemas.patient import (
    AccountPatientPage,
    BulkDeleteResponse,
    ClearResponse,
    GenerateRequest,
    GenerateResponse,
    PatientDetail,
    PatientListItem,
    PatientPage,
    PatientSummary,
    PinResult,
    PinUpdate,
)
from patientmock.schemas.user import UserBody, UserListResponse, UserResponse

__all__ = [
    "AccountPatientPage",
    "BulkDeleteResponse",
    "ClearResponse",
    "GenerateRequest",
    "GenerateResponse",
    "PatientDetail",
    "PatientListItem",
    "PatientPage",
    "PatientSummary",
    "PinResult",
    "PinUpdate",
    "UserBody",
    "UserListResponse",
    "UserResponse",
]
