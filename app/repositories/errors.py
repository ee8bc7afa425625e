"""
Repository-layer exceptions for inspection storage.
"""

from __future__ import annotations


class InspectionStoreError(Exception):
    """Base exception for inspection storage failures."""


class DuplicateKeyConflictError(InspectionStoreError):
    """
    Raised when a write hits the (owner, inspection_number) unique constraint.
    The whole write was rolled back.
    """
