"""
app/validators package marker.
"""

from app.validators.inspection_validator import (
    InspectionRecordValidator,
    NormalizationError,
)

__all__ = [
    "InspectionRecordValidator",
    "NormalizationError",
]
