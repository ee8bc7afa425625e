"""
tests/test_deduplication_resolver.py

DeduplicationResolver against the in-memory store.
"""

from __future__ import annotations

import pytest

from app.domain.errors import StorageUnavailable
from app.domain.inspection import DuplicateInfo, DuplicateReason, InspectionRecord
from app.schemas.inspections import DuplicateResponse
from app.services.deduplication_resolver import DeduplicationResolver, distinct_keys
from tests.conftest import FakeInspectionStore

OWNER = "ana@example.com"


def _records(*numbers: str) -> list[InspectionRecord]:
    return [InspectionRecord(inspection_number=number, owner=OWNER) for number in numbers]


def test_distinct_keys_preserves_first_occurrence_order() -> None:
    assert distinct_keys(_records("3", "1", "3", "2", "1")) == ["3", "1", "2"]


def test_all_new_when_nothing_stored(store: FakeInspectionStore) -> None:
    result = DeduplicationResolver(store).resolve(_records("1", "2", "3"), OWNER)

    assert [r.inspection_number for r in result.new] == ["1", "2", "3"]
    assert result.duplicates == []


def test_uses_one_lookup_with_distinct_keys(store: FakeInspectionStore) -> None:
    DeduplicationResolver(store).resolve(_records("5", "6", "5", "7", "6"), OWNER)

    assert store.find_calls == [(OWNER, ["5", "6", "7"])]


def test_stored_keys_are_duplicates_with_existing_id(store: FakeInspectionStore) -> None:
    stored = store.insert_many(OWNER, _records("2"))[0]

    result = DeduplicationResolver(store).resolve(_records("1", "2", "3"), OWNER)

    assert [r.inspection_number for r in result.new] == ["1", "3"]
    assert len(result.duplicates) == 1
    duplicate = result.duplicates[0]
    assert duplicate.inspection_number == "2"
    assert duplicate.reason == DuplicateReason.EXISTING
    assert duplicate.existing_id == stored.id


def test_repeated_key_in_submission_keeps_first(store: FakeInspectionStore) -> None:
    first = InspectionRecord(inspection_number="9", insured_name="first", owner=OWNER)
    second = InspectionRecord(inspection_number="9", insured_name="second", owner=OWNER)

    result = DeduplicationResolver(store).resolve([first, second], OWNER)

    assert result.new == [first]
    assert len(result.duplicates) == 1
    assert result.duplicates[0].reason == DuplicateReason.WITHIN_SUBMISSION
    assert result.duplicates[0].existing_id is None


def test_repeat_of_stored_key_references_stored_row(store: FakeInspectionStore) -> None:
    stored = store.insert_many(OWNER, _records("4"))[0]

    result = DeduplicationResolver(store).resolve(_records("4", "4"), OWNER)

    assert result.new == []
    assert [d.existing_id for d in result.duplicates] == [stored.id, stored.id]
    assert {d.reason for d in result.duplicates} == {DuplicateReason.EXISTING}


def test_duplicates_keep_input_order(store: FakeInspectionStore) -> None:
    store.insert_many(OWNER, _records("8"))

    result = DeduplicationResolver(store).resolve(_records("1", "1", "8", "2", "2"), OWNER)

    assert [d.inspection_number for d in result.duplicates] == ["1", "8", "2"]
    assert [d.reason for d in result.duplicates] == [
        DuplicateReason.WITHIN_SUBMISSION,
        DuplicateReason.EXISTING,
        DuplicateReason.WITHIN_SUBMISSION,
    ]


def test_keys_are_scoped_per_owner(store: FakeInspectionStore) -> None:
    store.insert_many("other@example.com", _records("1"))

    result = DeduplicationResolver(store).resolve(_records("1"), OWNER)

    assert [r.inspection_number for r in result.new] == ["1"]


def test_lookup_failure_is_storage_unavailable(store: FakeInspectionStore) -> None:
    store.fail_find = True

    with pytest.raises(StorageUnavailable):
        DeduplicationResolver(store).resolve(_records("1"), OWNER)


def test_empty_candidates_skip_storage(store: FakeInspectionStore) -> None:
    result = DeduplicationResolver(store).resolve([], OWNER)

    assert result.new == [] and result.duplicates == []
    assert store.find_calls == []


def test_duplicate_reason_is_a_closed_string_enum() -> None:
    assert DuplicateReason("within_submission") is DuplicateReason.WITHIN_SUBMISSION
    assert DuplicateReason.EXISTING == "existing"
    with pytest.raises(ValueError):
        DuplicateReason("unknown")

    payload = DuplicateResponse.from_domain(
        DuplicateInfo(inspection_number="9", reason=DuplicateReason.WRITE_CONFLICT)
    ).model_dump(mode="json")
    assert payload == {"inspection_number": "9", "reason": "write_conflict", "existing_id": None}
