"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.inspection import OWNER_INSPECTION_NUMBER_CONSTRAINT, Inspection

__all__ = [
    "Inspection",
    "OWNER_INSPECTION_NUMBER_CONSTRAINT",
]
