"""
db/models/inspection.py

Inspection rows uploaded from spreadsheets, partitioned by owner.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, Numeric, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

OWNER_INSPECTION_NUMBER_CONSTRAINT = "uq_inspections_owner_inspection_number"


class Inspection(Base):
    __tablename__ = "inspections"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    owner_email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Verified email of the uploading user",
    )
    inspection_number: Mapped[str] = mapped_column(String(50), nullable=False)
    claim_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    included_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    priority: Mapped[str | None] = mapped_column(String(50), nullable=True)
    inspection_company: Mapped[str | None] = mapped_column(String(10), nullable=True)
    company_branch: Mapped[str | None] = mapped_column(String(255), nullable=True)
    inspector: Mapped[str | None] = mapped_column(String(255), nullable=True)
    operator: Mapped[str | None] = mapped_column(String(255), nullable=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    prior_company_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    proposal_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    inspection_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    inspector_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    company_assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    inspector_assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    classification: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    coverage_limit: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Maximum guarantee limit",
    )
    insured_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    insurance_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    last_activity_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_activity: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_task_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "owner_email",
            "inspection_number",
            name=OWNER_INSPECTION_NUMBER_CONSTRAINT,
        ),
        Index("ix_inspections_owner_email_created_at", "owner_email", "created_at"),
    )
