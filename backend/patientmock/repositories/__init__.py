"""Repository layer for data access.

Repositories encapsulate database operations and provide a clean interface
for CRUD operations on domain objects.
"""

from patientmock.repositories.patient import PatientRepository
from patientmock.repositories.user import UserRepository

__all__ = ["PatientRepository", "UserRepository"]
