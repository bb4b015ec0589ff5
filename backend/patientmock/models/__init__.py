"""SQLAlchemy models."""

from patientmock.models.patient import DeletedPatientKey, PatientRecord
from patientmock.models.user import User

__all__ = [
    "DeletedPatientKey",
    "PatientRecord",
    "User",
]
