"""
app/repositories/inspection_repository.py

Persistence layer for owner-scoped inspection records.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import fields
from typing import Any, Protocol

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.inspection import InspectionRecord, OwnerIdentity, PersistedInspection
from app.repositories.errors import DuplicateKeyConflictError, InspectionStoreError
from db.models.inspection import Inspection

_UNIQUE_VIOLATION_SQLSTATE = "23505"
_RECORD_COLUMNS: tuple[str, ...] = tuple(
    field.name for field in fields(InspectionRecord) if field.name != "owner"
)


class InspectionStore(Protocol):
    """
    Storage collaborator used by the ingest and retrieval services.
    Implementations must enforce (owner, inspection_number) uniqueness.
    """

    def find_existing(
        self,
        owner: OwnerIdentity,
        keys: Sequence[str],
    ) -> list[tuple[str, uuid.UUID]]:
        ...

    def insert_many(
        self,
        owner: OwnerIdentity,
        records: Sequence[InspectionRecord],
    ) -> list[PersistedInspection]:
        ...

    def list_by_owner(
        self,
        owner: OwnerIdentity,
        *,
        limit: int,
    ) -> list[PersistedInspection]:
        ...


class InspectionRepository:
    """
    SQLAlchemy-backed inspection store. Each ``insert_many`` call commits as
    one unit or not at all.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_existing(
        self,
        owner: OwnerIdentity,
        keys: Sequence[str],
    ) -> list[tuple[str, uuid.UUID]]:
        """
        Return (inspection_number, id) pairs already stored for ``owner``.
        """

        if not keys:
            return []

        stmt = select(Inspection.inspection_number, Inspection.id).where(
            Inspection.owner_email == owner,
            Inspection.inspection_number.in_(list(keys)),
        )
        try:
            rows = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise InspectionStoreError("Failed to look up existing inspections.") from exc
        return [(row.inspection_number, row.id) for row in rows]

    def insert_many(
        self,
        owner: OwnerIdentity,
        records: Sequence[InspectionRecord],
    ) -> list[PersistedInspection]:
        """
        Insert all ``records`` under ``owner`` in one statement and commit.
        """

        if not records:
            return []

        payloads = [self._to_payload(owner, record) for record in records]
        stmt = insert(Inspection).returning(Inspection, sort_by_parameter_order=True)
        try:
            rows = self._session.scalars(stmt, payloads).all()
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateKeyConflictError(
                    "Inspection number already stored for this owner."
                ) from exc
            raise InspectionStoreError("Failed to insert inspections.") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise InspectionStoreError("Failed to insert inspections.") from exc

        return [self._to_persisted(row) for row in rows]

    def list_by_owner(
        self,
        owner: OwnerIdentity,
        *,
        limit: int,
    ) -> list[PersistedInspection]:
        """
        Return the owner's inspections, newest first.
        """

        stmt = (
            select(Inspection)
            .where(Inspection.owner_email == owner)
            .order_by(Inspection.created_at.desc())
            .limit(max(0, limit))
        )
        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise InspectionStoreError("Failed to fetch inspections.") from exc
        return [self._to_persisted(row) for row in rows]

    @staticmethod
    def _to_payload(owner: OwnerIdentity, record: InspectionRecord) -> dict[str, Any]:
        payload: dict[str, Any] = {
            column: getattr(record, column) for column in _RECORD_COLUMNS
        }
        payload["owner_email"] = owner
        return payload

    @staticmethod
    def _to_persisted(row: Inspection) -> PersistedInspection:
        record = InspectionRecord(
            **{column: getattr(row, column) for column in _RECORD_COLUMNS},
            owner=row.owner_email,
        )
        return PersistedInspection(id=row.id, created_at=row.created_at, record=record)


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == _UNIQUE_VIOLATION_SQLSTATE
    # sqlite3 carries no SQLSTATE.
    return "UNIQUE constraint failed" in str(orig)
