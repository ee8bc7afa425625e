"""
tests/test_inspection_validator.py

Unit tests for the inspection record normalizers and validator. Pure Python,
no storage.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.validators.inspection_validator import (
    InspectionRecordValidator,
    NormalizationError,
    normalize_amount,
    normalize_counter,
    normalize_instant,
    normalize_text,
)
from tests.conftest import raw_record


@pytest.fixture()
def validator() -> InspectionRecordValidator:
    return InspectionRecordValidator()


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------


class TestNormalizeText:
    def test_trims_whitespace(self) -> None:
        assert normalize_text("  Maria  ") == "Maria"

    def test_none_stays_absent_and_empty_stays_empty(self) -> None:
        assert normalize_text(None) is None
        assert normalize_text("") == ""

    def test_integer_cells_become_strings(self) -> None:
        assert normalize_text(12345) == "12345"

    @pytest.mark.parametrize("value", [True, 1.5, ["a"], {"a": 1}])
    def test_rejects_non_text(self, value: object) -> None:
        with pytest.raises(NormalizationError) as ctx:
            normalize_text(value)
        assert ctx.value.constraint == "type"


class TestNormalizeInstant:
    def test_parses_utc_z_suffix(self) -> None:
        parsed = normalize_instant("2025-03-10T12:30:00.000Z")
        assert parsed == datetime(2025, 3, 10, 12, 30, tzinfo=timezone.utc)

    def test_date_only_is_midnight_utc(self) -> None:
        assert normalize_instant("2025-03-10") == datetime(2025, 3, 10, tzinfo=timezone.utc)

    def test_keeps_explicit_offset(self) -> None:
        parsed = normalize_instant("2025-03-10T09:00:00-03:00")
        assert parsed is not None
        assert parsed.utcoffset().total_seconds() == -3 * 3600

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "undefined", "undefined-undefined-01", "2025-undefined-10T00:00:00Z"],
    )
    def test_absent_and_sentinel_values_become_none(self, value: object) -> None:
        assert normalize_instant(value) is None

    @pytest.mark.parametrize("value", ["10/03/2025", "not a date", 20250310])
    def test_rejects_malformed_dates(self, value: object) -> None:
        with pytest.raises(NormalizationError) as ctx:
            normalize_instant(value)
        assert ctx.value.constraint == "date"


class TestNormalizeCounter:
    @pytest.mark.parametrize(
        "value, expected",
        [(0, 0), (9999, 9999), (12.0, 12), ("42", 42), (" 7 ", 7), ("3.0", 3), (None, None), ("", None)],
    )
    def test_coerces_whole_numbers(self, value: object, expected: int | None) -> None:
        assert normalize_counter(value) == expected

    @pytest.mark.parametrize("value", [-1, 10000, "10000"])
    def test_rejects_out_of_range(self, value: object) -> None:
        with pytest.raises(NormalizationError) as ctx:
            normalize_counter(value)
        assert ctx.value.constraint == "range"

    @pytest.mark.parametrize("value", [True, 1.5, "1.5", "abc", [1]])
    def test_rejects_non_integers(self, value: object) -> None:
        with pytest.raises(NormalizationError) as ctx:
            normalize_counter(value)
        assert ctx.value.constraint == "integer"


class TestNormalizeAmount:
    def test_quantizes_to_cents(self) -> None:
        assert normalize_amount(150000.5) == Decimal("150000.50")
        assert normalize_amount("10.005") == Decimal("10.01")

    def test_accepts_bounds(self) -> None:
        assert normalize_amount(0) == Decimal("0.00")
        assert normalize_amount("999999999.99") == Decimal("999999999.99")

    def test_blank_is_absent(self) -> None:
        assert normalize_amount(None) is None
        assert normalize_amount(" ") is None

    @pytest.mark.parametrize(
        "value",
        [-0.01, "1000000000", 999999999.999, "999999999.995", 1e30, "1e30", 1e300, "9" * 40, "-1e40"],
    )
    def test_rejects_out_of_range(self, value: object) -> None:
        with pytest.raises(NormalizationError) as ctx:
            normalize_amount(value)
        assert ctx.value.constraint == "range"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "NaN", "abc", False])
    def test_rejects_non_numbers(self, value: object) -> None:
        with pytest.raises(NormalizationError) as ctx:
            normalize_amount(value)
        assert ctx.value.constraint == "number"


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------


class TestInspectionRecordValidator:
    def test_valid_record_is_normalized(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate(raw_record("1001", proposal_date="undefined"))

        assert violations == []
        assert record is not None
        assert record.inspection_number == "1001"
        assert record.inspector == "Maria Souza"
        assert record.coverage_limit == Decimal("150000.50")
        assert record.proposal_date is None
        assert record.included_at == datetime(2025, 3, 10, 12, 30, tzinfo=timezone.utc)

    def test_absent_optional_fields_stay_none(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate({"inspection_number": "7"})
        assert violations == []
        assert record is not None
        assert record.claim_number is None
        assert record.address is None

    def test_numeric_inspection_number_is_accepted(self, validator: InspectionRecordValidator) -> None:
        record, _ = validator.validate({"inspection_number": 98765})
        assert record is not None
        assert record.inspection_number == "98765"

    @pytest.mark.parametrize(
        "value, constraint",
        [(None, "required"), ("", "required"), ("  ", "required"), ("12A", "pattern"), ("1" * 51, "max_length")],
    )
    def test_inspection_number_constraints(
        self,
        validator: InspectionRecordValidator,
        value: object,
        constraint: str,
    ) -> None:
        record, violations = validator.validate(raw_record("1", inspection_number=value), index=3)
        assert record is None
        assert [(v.field, v.constraint, v.record_index) for v in violations] == [
            ("inspection_number", constraint, 3)
        ]

    def test_priority_character_set(self, validator: InspectionRecordValidator) -> None:
        ok, _ = validator.validate(raw_record("1", priority="Média - 2"))
        assert ok is not None

        record, violations = validator.validate(raw_record("1", priority="alta; drop"))
        assert record is None
        assert violations[0].field == "priority"
        assert violations[0].constraint == "pattern"

    def test_text_length_caps(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate(raw_record("1", inspection_company="X" * 11))
        assert record is None
        assert violations[0].field == "inspection_company"
        assert violations[0].constraint == "max_length"

        record, violations = validator.validate(raw_record("1", address="A" * 1000))
        assert violations == []

    def test_unknown_fields_are_rejected(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate(raw_record("1", nr_inspecao="1", extra=True))
        assert record is None
        assert {v.field for v in violations} == {"nr_inspecao", "extra"}
        assert {v.constraint for v in violations} == {"unknown_field"}

    def test_owner_fields_are_accepted_but_not_trusted(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate(raw_record("1", uploaded_by="someone@else.com"))
        assert violations == []
        assert record is not None
        assert record.owner is None

    def test_collects_every_violation_in_a_record(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate(
            raw_record("abc", inspection_days=-5, scheduled_at="yesterday", coverage_limit="lots")
        )
        assert record is None
        assert {v.field for v in violations} == {
            "inspection_number",
            "inspection_days",
            "scheduled_at",
            "coverage_limit",
        }

    def test_non_object_record(self, validator: InspectionRecordValidator) -> None:
        record, violations = validator.validate(["1001"], index=2)
        assert record is None
        assert violations[0].field == "<record>"
        assert violations[0].constraint == "type"
        assert violations[0].record_index == 2

    def test_validate_many_keeps_order_and_indices(self, validator: InspectionRecordValidator) -> None:
        records, violations = validator.validate_many(
            [raw_record("1"), raw_record("x"), raw_record("3")]
        )
        assert [r.inspection_number for r in records] == ["1", "3"]
        assert [v.record_index for v in violations] == [1]
