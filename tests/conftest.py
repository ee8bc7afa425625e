"""
Shared fixtures for inspection service tests.

``FakeInspectionStore`` is an in-memory InspectionStore that enforces the
(owner, inspection_number) uniqueness rule the real table enforces, and can
be told to fail specific calls.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from app.domain.inspection import InspectionRecord, PersistedInspection
from app.repositories.errors import DuplicateKeyConflictError, InspectionStoreError
from app.services.inspection_ingestion_service import InspectionIngestionService

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeInspectionStore:
    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], PersistedInspection] = {}
        self.find_calls: list[tuple[str, list[str]]] = []
        self.insert_calls: list[int] = []
        self.fail_find = False
        self.fail_list = False
        self.conflict_on_insert_calls: set[int] = set()
        self.fail_on_insert_calls: set[int] = set()
        self._tick = 0

    def find_existing(self, owner: str, keys: Sequence[str]) -> list[tuple[str, uuid.UUID]]:
        self.find_calls.append((owner, list(keys)))
        if self.fail_find:
            raise InspectionStoreError("lookup timed out")
        return [(key, self.rows[(owner, key)].id) for key in keys if (owner, key) in self.rows]

    def insert_many(self, owner: str, records: Sequence[InspectionRecord]) -> list[PersistedInspection]:
        self.insert_calls.append(len(records))
        call_number = len(self.insert_calls)
        if call_number in self.fail_on_insert_calls:
            raise InspectionStoreError("connection reset")

        keys = [record.inspection_number for record in records]
        if (
            call_number in self.conflict_on_insert_calls
            or len(set(keys)) != len(keys)
            or any((owner, key) in self.rows for key in keys)
        ):
            raise DuplicateKeyConflictError("duplicate key")

        persisted: list[PersistedInspection] = []
        for record in records:
            self._tick += 1
            row = PersistedInspection(
                id=uuid.uuid4(),
                created_at=BASE_TIME + timedelta(seconds=self._tick),
                record=replace(record, owner=owner),
            )
            self.rows[(owner, record.inspection_number)] = row
            persisted.append(row)
        return persisted

    def list_by_owner(self, owner: str, *, limit: int) -> list[PersistedInspection]:
        if self.fail_list:
            raise InspectionStoreError("statement timeout")
        owned = [row for (row_owner, _), row in self.rows.items() if row_owner == owner]
        owned.sort(key=lambda row: row.created_at, reverse=True)
        return owned[:limit]

    def stored_numbers(self, owner: str) -> set[str]:
        return {key for (row_owner, key) in self.rows if row_owner == owner}


def raw_record(number: str | int, **overrides: Any) -> dict[str, Any]:
    """A valid raw inspection payload as the spreadsheet UI sends it."""
    record: dict[str, Any] = {
        "inspection_number": str(number),
        "claim_number": "SIN-001",
        "included_at": "2025-03-10T12:30:00.000Z",
        "priority": "Alta",
        "inspector": "  Maria Souza  ",
        "inspection_days": 4,
        "coverage_limit": 150000.5,
        "insured_name": "Acme Ltda",
    }
    record.update(overrides)
    return record


@pytest.fixture()
def store() -> FakeInspectionStore:
    return FakeInspectionStore()


@pytest.fixture()
def ingestion_service(store: FakeInspectionStore) -> InspectionIngestionService:
    return InspectionIngestionService(
        store,
        chunk_size=1000,
        max_submission_size=10000,
        max_reported_violations=500,
    )
