"""
app/schemas/inspections.py

Response schemas for inspection endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.inspection import DuplicateInfo, DuplicateReason, IngestReport, PersistedInspection


class InspectionResponse(BaseModel):
    """
    API response model for one stored inspection.
    """

    id: uuid.UUID
    owner: str | None = None
    created_at: datetime
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
    coverage_limit: float | None = None
    insured_name: str | None = None
    insurance_type: str | None = None
    address: str | None = None
    last_activity_at: datetime | None = None
    current_activity: str | None = None
    last_task_at: datetime | None = None

    @classmethod
    def from_persisted(cls, inspection: PersistedInspection) -> InspectionResponse:
        fields = inspection.record.to_dict()
        if fields["coverage_limit"] is not None:
            fields["coverage_limit"] = float(fields["coverage_limit"])
        return cls(id=inspection.id, created_at=inspection.created_at, **fields)


class DuplicateResponse(BaseModel):
    """
    API response model for one rejected inspection number.
    """

    inspection_number: str
    reason: DuplicateReason
    existing_id: uuid.UUID | None = None

    @classmethod
    def from_domain(cls, duplicate: DuplicateInfo) -> DuplicateResponse:
        return cls(
            inspection_number=duplicate.inspection_number,
            reason=duplicate.reason,
            existing_id=duplicate.existing_id,
        )


class BulkIngestResponse(BaseModel):
    """
    API response model for a bulk ingest call.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    count: int = Field(..., ge=0)
    duplicates: int = Field(..., ge=0)
    duplicate_list: list[DuplicateResponse] | None = Field(
        default=None,
        alias="duplicateList",
    )
    data: list[InspectionResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: IngestReport) -> BulkIngestResponse:
        return cls(
            success=report.success,
            message=report.message,
            count=report.inserted_count,
            duplicates=report.duplicate_count,
            duplicate_list=(
                [DuplicateResponse.from_domain(item) for item in report.duplicates]
                if report.duplicates
                else None
            ),
            data=[InspectionResponse.from_persisted(item) for item in report.inserted],
        )
