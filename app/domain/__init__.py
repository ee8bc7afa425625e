"""
app/domain package marker.
"""

from app.domain.errors import (
    InspectionServiceError,
    RateLimited,
    StorageUnavailable,
    Unauthorized,
    ValidationFailed,
)
from app.domain.inspection import (
    DuplicateInfo,
    DuplicateReason,
    FieldViolation,
    IngestReport,
    InspectionRecord,
    OwnerIdentity,
    PersistedInspection,
    PersistResult,
    ResolutionResult,
)

__all__ = [
    "DuplicateInfo",
    "DuplicateReason",
    "FieldViolation",
    "IngestReport",
    "InspectionRecord",
    "InspectionServiceError",
    "OwnerIdentity",
    "PersistedInspection",
    "PersistResult",
    "RateLimited",
    "ResolutionResult",
    "StorageUnavailable",
    "Unauthorized",
    "ValidationFailed",
]
