"""
app/schemas package marker.
"""

from app.schemas.inspections import BulkIngestResponse, DuplicateResponse, InspectionResponse

__all__ = [
    "BulkIngestResponse",
    "DuplicateResponse",
    "InspectionResponse",
]
