"""
app/domain/errors.py

Error kinds surfaced by the inspection services. Storage-driver and
framework exceptions are translated into one of these before leaving the
service layer.
"""

from __future__ import annotations

from app.domain.inspection import FieldViolation


class InspectionServiceError(Exception):
    """Base exception for inspection service failures."""


class ValidationFailed(InspectionServiceError):
    """
    Raised when a submission is rejected before any storage access.
    """

    def __init__(
        self,
        message: str,
        *,
        violations: list[FieldViolation] | None = None,
        total_violations: int | None = None,
    ) -> None:
        super().__init__(message)
        self.violations = tuple(violations or ())
        self.total_violations = (
            total_violations if total_violations is not None else len(self.violations)
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "message": str(self),
            "total_violations": self.total_violations,
            "errors": [
                {
                    "record_index": violation.record_index,
                    "field": violation.field,
                    "constraint": violation.constraint,
                    "message": violation.message,
                    "value": violation.value,
                }
                for violation in self.violations
            ],
        }


class Unauthorized(InspectionServiceError):
    """Raised when the caller's credential is missing or invalid."""


class RateLimited(InspectionServiceError):
    """Raised when a caller exceeds its request budget for the window."""

    def __init__(self, message: str, *, retry_after_seconds: int) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class StorageUnavailable(InspectionServiceError):
    """
    Raised when the backing store cannot serve a call. Retrying the whole
    ingest or list call is safe.
    """
