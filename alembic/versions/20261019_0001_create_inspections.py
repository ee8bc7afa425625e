"""create inspections table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "inspections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_email", sa.String(length=320), nullable=False),
        sa.Column("inspection_number", sa.String(length=50), nullable=False),
        sa.Column("claim_number", sa.String(length=50), nullable=True),
        sa.Column("included_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("priority", sa.String(length=50), nullable=True),
        sa.Column("inspection_company", sa.String(length=10), nullable=True),
        sa.Column("company_branch", sa.String(length=255), nullable=True),
        sa.Column("inspector", sa.String(length=255), nullable=True),
        sa.Column("operator", sa.String(length=255), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("prior_company_days", sa.Integer(), nullable=True),
        sa.Column("proposal_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("inspection_days", sa.Integer(), nullable=True),
        sa.Column("inspector_days", sa.Integer(), nullable=True),
        sa.Column("company_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("inspector_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("classification", sa.String(length=50), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("coverage_limit", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("insured_name", sa.String(length=255), nullable=True),
        sa.Column("insurance_type", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=1000), nullable=True),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_activity", sa.String(length=255), nullable=True),
        sa.Column("last_task_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "owner_email",
            "inspection_number",
            name="uq_inspections_owner_inspection_number",
        ),
    )
    op.create_index(
        "ix_inspections_owner_email_created_at",
        "inspections",
        ["owner_email", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_inspections_owner_email_created_at", table_name="inspections")
    op.drop_table("inspections")
