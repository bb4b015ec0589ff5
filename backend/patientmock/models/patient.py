"""Patient record model.

One canonical row per patient. Nested structures (address, insurance,
team, lastOrder, audit metadata, ...) are stored as JSON text columns
and interpreted by the normalizer on write and the projections on read.
"""

from typing import Any

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from patientmock.constants import DEFAULT_STATUS
from patientmock.database import Base


class PatientRecord(Base):
    """Canonical stored patient."""

    __tablename__ = "patients"

    # === Identity ===
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_id: Mapped[str | None] = mapped_column("guid", String(64), nullable=True)

    # === Demographics ===
    first_name: Mapped[str] = mapped_column("firstName", String(255), nullable=False)
    last_name: Mapped[str] = mapped_column("lastName", String(255), nullable=False)
    date_of_birth: Mapped[str | None] = mapped_column("dateOfBirth", String(32), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # === Clinical ===
    room_number: Mapped[str | None] = mapped_column("roomNumber", String(32), nullable=True)
    bed_number: Mapped[str | None] = mapped_column("bedNumber", String(32), nullable=True)
    admission_date: Mapped[str | None] = mapped_column("admissionDate", String(64), nullable=True)
    discharge_date: Mapped[str | None] = mapped_column("dischargeDate", String(64), nullable=True)
    primary_physician: Mapped[Any | None] = mapped_column("primaryPhysician", JSON, nullable=True)
    diagnosis_codes: Mapped[list[str] | None] = mapped_column("diagnosisCodes", JSON, nullable=True)

    # === Payer ===
    payer_type: Mapped[str | None] = mapped_column("payer", String(255), nullable=True)
    insurance: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # === Workflow ===
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=DEFAULT_STATUS)
    is_pinned: Mapped[bool] = mapped_column("isPinned", Boolean, nullable=False, default=False, index=True)
    team: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    agency: Mapped[Any | None] = mapped_column(JSON, nullable=True)
    last_order: Mapped[dict[str, Any] | None] = mapped_column("lastOrder", JSON, nullable=True)

    # === Audit ===
    # createdAt/createdBy/updatedAt/updatedBy; "metadata" is reserved on declarative classes
    audit: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<PatientRecord(id={self.id}, name={self.first_name} {self.last_name})>"


class DeletedPatientKey(Base):
    """Key of a deleted patient. Deleted keys are never handed out again."""

    __tablename__ = "deleted_patient_keys"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    deleted_at: Mapped[str] = mapped_column("deletedAt", String(64), nullable=False)

    def __repr__(self) -> str:
        return f"<DeletedPatientKey(id={self.id})>"
