"""
app/validators/inspection_validator.py

Field-level normalization and validation for raw inspection records.

Every coercion the ingest flow performs lives in one of the ``normalize_*``
functions below so it can be exercised on its own. The validator class only
walks the known fields and collects violations.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from app.domain.inspection import FieldViolation, InspectionRecord

NATURAL_KEY_FIELD = "inspection_number"
NATURAL_KEY_MAX_LENGTH = 50
NATURAL_KEY_PATTERN = re.compile(r"[0-9]+")
PRIORITY_PATTERN = re.compile(r"[A-Za-zÀ-ÿ0-9\s\-]+")

MALFORMED_DATE_TOKEN = "undefined"

COUNTER_MIN = 0
COUNTER_MAX = 9999
AMOUNT_MIN = Decimal("0")
AMOUNT_MAX = Decimal("999999999.99")
AMOUNT_QUANTUM = Decimal("0.01")

TEXT_FIELD_MAX_LENGTHS: dict[str, int] = {
    "claim_number": 50,
    "priority": 50,
    "inspection_company": 10,
    "company_branch": 255,
    "inspector": 255,
    "operator": 255,
    "classification": 50,
    "category": 50,
    "insured_name": 255,
    "insurance_type": 50,
    "address": 1000,
    "current_activity": 255,
}

INSTANT_FIELDS: tuple[str, ...] = (
    "included_at",
    "scheduled_at",
    "proposal_date",
    "company_assigned_at",
    "inspector_assigned_at",
    "last_activity_at",
    "last_task_at",
)

COUNTER_FIELDS: tuple[str, ...] = (
    "prior_company_days",
    "inspection_days",
    "inspector_days",
)

AMOUNT_FIELDS: tuple[str, ...] = ("coverage_limit",)

# Accepted from callers but always replaced by the authenticated owner.
OWNER_FIELDS: tuple[str, ...] = ("owner", "uploaded_by")

KNOWN_FIELDS: frozenset[str] = frozenset(
    (NATURAL_KEY_FIELD,)
    + tuple(TEXT_FIELD_MAX_LENGTHS)
    + INSTANT_FIELDS
    + COUNTER_FIELDS
    + AMOUNT_FIELDS
    + OWNER_FIELDS
)


class NormalizationError(ValueError):
    """
    Raised by a normalize_* function when a value cannot be coerced.
    """

    def __init__(self, constraint: str, message: str) -> None:
        super().__init__(message)
        self.constraint = constraint
        self.message = message


def normalize_text(value: Any) -> str | None:
    """
    Trim a text value. ``None`` stays absent and ``""`` stays empty.
    Integers (spreadsheet cells typed as numbers) become their decimal string.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise NormalizationError("type", "Value must be a string.")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    raise NormalizationError("type", "Value must be a string.")


def normalize_instant(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 date or date-time into an aware datetime.

    Blank strings and strings carrying the ``undefined`` sentinel produced by
    broken spreadsheet date conversion are treated as absent.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise NormalizationError("date", "Value must be an ISO-8601 date string.")

    raw = value.strip()
    if not raw or MALFORMED_DATE_TOKEN in raw.lower():
        return None

    normalized = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise NormalizationError("date", "Invalid date/time format.") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_counter(value: Any) -> int | None:
    """
    Coerce a day counter to an int within 0..9999.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise NormalizationError("integer", "Value must be a whole number.")

    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise NormalizationError("integer", "Value must be a whole number.")
        number = int(value)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            number = int(raw)
        except ValueError:
            try:
                as_float = float(raw)
            except ValueError as exc:
                raise NormalizationError("integer", "Value must be a whole number.") from exc
            if not as_float.is_integer():
                raise NormalizationError("integer", "Value must be a whole number.")
            number = int(as_float)
    else:
        raise NormalizationError("integer", "Value must be a whole number.")

    if number < COUNTER_MIN or number > COUNTER_MAX:
        raise NormalizationError(
            "range",
            f"Value must be between {COUNTER_MIN} and {COUNTER_MAX}.",
        )
    return number


def normalize_amount(value: Any) -> Decimal | None:
    """
    Coerce a monetary amount to a 2-place Decimal within 0..999,999,999.99.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise NormalizationError("number", "Value must be a number.")
    if isinstance(value, float) and not math.isfinite(value):
        raise NormalizationError("number", "Value must be a finite number.")

    if isinstance(value, (int, float, Decimal)):
        raw = str(value)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
    else:
        raise NormalizationError("number", "Value must be a number.")

    try:
        amount = Decimal(raw)
    except InvalidOperation as exc:
        raise NormalizationError("number", "Value must be a number.") from exc
    if not amount.is_finite():
        raise NormalizationError("number", "Value must be a finite number.")

    # Bound before quantizing; quantize overflows the context precision on huge values.
    _check_amount_range(amount)
    amount = amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    _check_amount_range(amount)
    return amount


def _check_amount_range(amount: Decimal) -> None:
    if amount < AMOUNT_MIN or amount > AMOUNT_MAX:
        raise NormalizationError(
            "range",
            f"Value must be between {AMOUNT_MIN} and {AMOUNT_MAX}.",
        )


class InspectionRecordValidator:
    """
    Validates and normalizes raw inspection payloads.
    """

    def validate(
        self,
        raw: Any,
        *,
        index: int = 0,
    ) -> tuple[InspectionRecord | None, list[FieldViolation]]:
        """
        Validate one raw record. Returns the record or the full list of
        violations found in it, never both.
        """

        if not isinstance(raw, Mapping):
            return None, [
                FieldViolation(
                    record_index=index,
                    field="<record>",
                    constraint="type",
                    message="Record must be a JSON object.",
                    value=_stringify(raw),
                )
            ]

        violations: list[FieldViolation] = []
        for key in raw:
            if key not in KNOWN_FIELDS:
                violations.append(
                    FieldViolation(
                        record_index=index,
                        field=str(key),
                        constraint="unknown_field",
                        message="Field is not part of the inspection record.",
                        value=_stringify(raw[key]),
                    )
                )

        values: dict[str, Any] = {}
        values[NATURAL_KEY_FIELD] = self._parse_natural_key(raw.get(NATURAL_KEY_FIELD), index, violations)

        for field_name, max_length in TEXT_FIELD_MAX_LENGTHS.items():
            values[field_name] = self._parse_text(raw.get(field_name), field_name, max_length, index, violations)

        if values["priority"] is not None and not PRIORITY_PATTERN.fullmatch(values["priority"]):
            violations.append(
                FieldViolation(
                    record_index=index,
                    field="priority",
                    constraint="pattern",
                    message="Priority contains invalid characters.",
                    value=values["priority"],
                )
            )

        for field_name in INSTANT_FIELDS:
            values[field_name] = self._apply(normalize_instant, raw.get(field_name), field_name, index, violations)
        for field_name in COUNTER_FIELDS:
            values[field_name] = self._apply(normalize_counter, raw.get(field_name), field_name, index, violations)
        for field_name in AMOUNT_FIELDS:
            values[field_name] = self._apply(normalize_amount, raw.get(field_name), field_name, index, violations)

        if violations:
            return None, violations
        return InspectionRecord(**values), []

    def validate_many(
        self,
        raws: Sequence[Any],
    ) -> tuple[list[InspectionRecord], list[FieldViolation]]:
        records: list[InspectionRecord] = []
        violations: list[FieldViolation] = []
        for index, raw in enumerate(raws):
            record, record_violations = self.validate(raw, index=index)
            if record_violations:
                violations.extend(record_violations)
            elif record is not None:
                records.append(record)
        return records, violations

    def _parse_natural_key(
        self,
        value: Any,
        index: int,
        violations: list[FieldViolation],
    ) -> str:
        try:
            key = normalize_text(value)
        except NormalizationError as exc:
            violations.append(_violation(index, NATURAL_KEY_FIELD, exc, value))
            return ""

        if not key:
            violations.append(
                FieldViolation(
                    record_index=index,
                    field=NATURAL_KEY_FIELD,
                    constraint="required",
                    message="Inspection number is required.",
                    value=_stringify(value),
                )
            )
            return ""
        if len(key) > NATURAL_KEY_MAX_LENGTH:
            violations.append(
                FieldViolation(
                    record_index=index,
                    field=NATURAL_KEY_FIELD,
                    constraint="max_length",
                    message=f"Value must be at most {NATURAL_KEY_MAX_LENGTH} characters.",
                    value=key,
                )
            )
        elif not NATURAL_KEY_PATTERN.fullmatch(key):
            violations.append(
                FieldViolation(
                    record_index=index,
                    field=NATURAL_KEY_FIELD,
                    constraint="pattern",
                    message="Inspection number must contain digits only.",
                    value=key,
                )
            )
        return key

    def _parse_text(
        self,
        value: Any,
        field_name: str,
        max_length: int,
        index: int,
        violations: list[FieldViolation],
    ) -> str | None:
        text = self._apply(normalize_text, value, field_name, index, violations)
        if text is not None and len(text) > max_length:
            violations.append(
                FieldViolation(
                    record_index=index,
                    field=field_name,
                    constraint="max_length",
                    message=f"Value must be at most {max_length} characters.",
                    value=text,
                )
            )
            return None
        return text

    @staticmethod
    def _apply(
        normalizer: Callable[[Any], Any],
        value: Any,
        field_name: str,
        index: int,
        violations: list[FieldViolation],
    ) -> Any:
        try:
            return normalizer(value)
        except NormalizationError as exc:
            violations.append(_violation(index, field_name, exc, value))
            return None


def _violation(index: int, field_name: str, exc: NormalizationError, value: Any) -> FieldViolation:
    return FieldViolation(
        record_index=index,
        field=field_name,
        constraint=exc.constraint,
        message=exc.message,
        value=_stringify(value),
    )


def _stringify(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
