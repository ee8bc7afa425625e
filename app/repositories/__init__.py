"""
app/repositories package marker.
"""

from app.repositories.errors import DuplicateKeyConflictError, InspectionStoreError
from app.repositories.inspection_repository import InspectionRepository, InspectionStore

__all__ = [
    "DuplicateKeyConflictError",
    "InspectionRepository",
    "InspectionStore",
    "InspectionStoreError",
]
