"""Patient response shapes.

One canonical stored record, several named projections selected by the
serving API version.
"""

from patientmock.projections.patient import to_detail, to_list_item, to_summary
from patientmock.projections.registry import Projection, ProjectionRegistry

__all__ = [
    "Projection",
    "ProjectionRegistry",
    "to_detail",
    "to_list_item",
    "to_summary",
]
