"""
app/domain/inspection.py

Domain models used by the inspection bulk-ingest flow.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

OwnerIdentity = str


class DuplicateReason(str, Enum):
    EXISTING = "existing"
    WITHIN_SUBMISSION = "within_submission"
    WRITE_CONFLICT = "write_conflict"


@dataclass(frozen=True)
class InspectionRecord:
    """
    One validated inspection observation, ready for deduplication.
    """

    inspection_number: str
    claim_number: str | None = None
    included_at: datetime | None = None
    priority: str | None = None
    inspection_company: str | None = None
    company_branch: str | None = None
    inspector: str | None = None
    operator: str | None = None
    scheduled_at: datetime | None = None
    prior_company_days: int | None = None
    proposal_date: datetime | None = None
    inspection_days: int | None = None
    inspector_days: int | None = None
    company_assigned_at: datetime | None = None
    inspector_assigned_at: datetime | None = None
    classification: str | None = None
    category: str | None = None
    coverage_limit: Decimal | None = None
    insured_name: str | None = None
    insurance_type: str | None = None
    address: str | None = None
    last_activity_at: datetime | None = None
    current_activity: str | None = None
    last_task_at: datetime | None = None
    owner: OwnerIdentity | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PersistedInspection:
    """
    A stored inspection with its storage-assigned id and creation time.
    """

    id: uuid.UUID
    created_at: datetime
    record: InspectionRecord

    @property
    def owner(self) -> OwnerIdentity | None:
        return self.record.owner

    @property
    def inspection_number(self) -> str:
        return self.record.inspection_number


@dataclass(frozen=True)
class DuplicateInfo:
    """
    A rejected natural key and the stored record it collided with.

    ``existing_id`` is None when the collision happened inside the same
    submission or during a conflicting chunk write.
    """

    inspection_number: str
    reason: DuplicateReason
    existing_id: uuid.UUID | None = None


@dataclass(frozen=True)
class FieldViolation:
    """
    One field-level validation failure.
    """

    record_index: int
    field: str
    constraint: str
    message: str
    value: str | None = None


@dataclass(frozen=True)
class ResolutionResult:
    new: list[InspectionRecord] = field(default_factory=list)
    duplicates: list[DuplicateInfo] = field(default_factory=list)


@dataclass(frozen=True)
class PersistResult:
    inserted_records: list[PersistedInspection] = field(default_factory=list)
    inserted_count: int = 0
    skipped_records: list[InspectionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class IngestReport:
    """
    End-of-call bulk ingest result.
    """

    success: bool
    message: str
    inserted_count: int
    duplicate_count: int
    inserted: list[PersistedInspection] = field(default_factory=list)
    duplicates: list[DuplicateInfo] | None = None
