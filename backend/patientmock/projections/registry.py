"""Projection registry.

Maps projection names (as referenced by ``ApiVersion.projection``) to the
pure function producing the shape and the pydantic model describing it.
"""

from dataclasses import dataclass
from typing import Callable

from pydantic import BaseModel

from patientmock.models.patient import PatientRecord
from patientmock.projections.patient import to_detail, to_list_item, to_summary
from patientmock.schemas.patient import PatientDetail, PatientListItem, PatientSummary


@dataclass(frozen=True)
class Projection:
    """A named response shape.

    Args:
        name: Registry key.
        model: Response model class, used for OpenAPI and serialization.
        project: Pure function from a stored record to ``model``.
        exclude_none: Drop ``None`` fields on the wire instead of sending null.
    """

    name: str
    model: type[BaseModel]
    project: Callable[[PatientRecord], BaseModel]
    exclude_none: bool = False

    def __call__(self, record: PatientRecord) -> BaseModel:
        return self.project(record)


# Module-level storage (not class-level to avoid shared mutable state)
_projections: dict[str, Projection] = {}


class ProjectionRegistry:
    """Registry of response shapes by name."""

    @classmethod
    def register(cls, projection: Projection) -> None:
        _projections[projection.name] = projection

    @classmethod
    def get(cls, name: str) -> Projection:
        """Get a projection by name.

        Raises:
            KeyError: If no projection is registered under ``name``.
        """
        try:
            return _projections[name]
        except KeyError:
            raise KeyError(f"Unknown projection: {name}") from None

    @classmethod
    def names(cls) -> list[str]:
        return sorted(_projections)


ProjectionRegistry.register(Projection("list_item", PatientListItem, to_list_item))
ProjectionRegistry.register(Projection("summary", PatientSummary, to_summary, exclude_none=True))
ProjectionRegistry.register(Projection("detail", PatientDetail, to_detail, exclude_none=True))
