"""
app/services/inspection_ingestion_service.py

Service layer for bulk inspection ingestion.

One call runs, in order and without internal parallelism:

    1. Size checks on the submission                (no storage access)
    2. InspectionRecordValidator over every record   (all-or-nothing)
    3. Owner stamping with the authenticated identity
    4. DeduplicationResolver.resolve()               (one existence lookup)
    5. BatchPersister.persist()                      (sequential chunks)

Chunks committed before a later failure stay committed. Retrying the whole
call is safe: keys stored by the first attempt come back as duplicates.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from app.config import get_ingestion_settings
from app.domain.errors import Unauthorized, ValidationFailed
from app.domain.inspection import (
    DuplicateInfo,
    DuplicateReason,
    IngestReport,
    OwnerIdentity,
    PersistedInspection,
)
from app.repositories.inspection_repository import InspectionStore
from app.services.batch_persister import BatchPersister
from app.services.deduplication_resolver import DeduplicationResolver
from app.validators.inspection_validator import InspectionRecordValidator

logger = logging.getLogger(__name__)


class InspectionIngestionService:
    """
    Coordinates validation, deduplication, and chunked persistence.
    """

    def __init__(
        self,
        store: InspectionStore,
        *,
        chunk_size: int,
        max_submission_size: int,
        max_reported_violations: int,
        validator: InspectionRecordValidator | None = None,
    ) -> None:
        self._max_submission_size = max(1, max_submission_size)
        self._max_reported_violations = max(1, max_reported_violations)
        self._validator = validator or InspectionRecordValidator()
        self._resolver = DeduplicationResolver(store)
        self._persister = BatchPersister(store, chunk_size=chunk_size)

    def ingest(
        self,
        raw_records: Sequence[Any],
        owner: OwnerIdentity,
    ) -> IngestReport:
        """
        Validate, deduplicate, and store ``raw_records`` for ``owner``.

        Raises:
            Unauthorized:       ``owner`` is blank.
            ValidationFailed:   the submission is empty, too large, or any
                                record has a field violation. Nothing is
                                written.
            StorageUnavailable: the existence lookup or a chunk write failed
                                for a reason other than a unique conflict.
        """
        if not owner or not owner.strip():
            raise Unauthorized("Authenticated owner is required.")

        if not raw_records:
            raise ValidationFailed("Submission must contain at least one record.")
        if len(raw_records) > self._max_submission_size:
            raise ValidationFailed(
                f"At most {self._max_submission_size} records are accepted per submission."
            )

        started = time.monotonic()
        logger.info(
            "Processing bulk inspection ingest owner=%s records=%d",
            owner,
            len(raw_records),
        )

        records, violations = self._validator.validate_many(raw_records)
        if violations:
            failed_records = len({violation.record_index for violation in violations})
            logger.warning(
                "Rejected inspection submission owner=%s failed_records=%d violations=%d",
                owner,
                failed_records,
                len(violations),
            )
            raise ValidationFailed(
                f"{failed_records} of {len(raw_records)} records failed validation.",
                violations=violations[: self._max_reported_violations],
                total_violations=len(violations),
            )

        stamped = [replace(record, owner=owner) for record in records]

        resolution = self._resolver.resolve(stamped, owner)
        if not resolution.new:
            report = self._build_report(inserted=[], duplicates=resolution.duplicates)
            self._log_outcome(owner, report, started)
            return report

        persisted = self._persister.persist(resolution.new, owner)
        conflicts = [
            DuplicateInfo(
                inspection_number=record.inspection_number,
                reason=DuplicateReason.WRITE_CONFLICT,
            )
            for record in persisted.skipped_records
        ]

        report = self._build_report(
            inserted=persisted.inserted_records,
            duplicates=[*resolution.duplicates, *conflicts],
        )
        self._log_outcome(owner, report, started)
        return report

    @staticmethod
    def _build_report(
        *,
        inserted: list[PersistedInspection],
        duplicates: list[DuplicateInfo],
    ) -> IngestReport:
        if duplicates:
            message = (
                f"{len(inserted)} inspections inserted; "
                f"{len(duplicates)} duplicates skipped."
            )
        else:
            message = f"{len(inserted)} inspections inserted."
        return IngestReport(
            success=True,
            message=message,
            inserted_count=len(inserted),
            duplicate_count=len(duplicates),
            inserted=inserted,
            duplicates=duplicates or None,
        )

    @staticmethod
    def _log_outcome(owner: OwnerIdentity, report: IngestReport, started: float) -> None:
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "Bulk inspection ingest finished owner=%s inserted=%d duplicates=%d duration_ms=%d",
            owner,
            report.inserted_count,
            report.duplicate_count,
            duration_ms,
        )


def build_inspection_ingestion_service(store: InspectionStore) -> InspectionIngestionService:
    """
    Build the ingestion service over ``store`` with env-driven settings.
    """
    settings = get_ingestion_settings()
    return InspectionIngestionService(
        store,
        chunk_size=settings.chunk_size,
        max_submission_size=settings.max_submission_size,
        max_reported_violations=settings.max_reported_violations,
    )
