"""
app/services/deduplication_resolver.py

Classifies candidate inspections as new or duplicate for one owner.

Duplicates are detected two ways: against rows already stored for the owner
(one lookup for the whole batch), and against earlier records of the same
submission. Only the first occurrence of a key can be new.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from app.domain.errors import StorageUnavailable
from app.domain.inspection import (
    DuplicateInfo,
    DuplicateReason,
    InspectionRecord,
    OwnerIdentity,
    ResolutionResult,
)
from app.repositories.errors import InspectionStoreError
from app.repositories.inspection_repository import InspectionStore

logger = logging.getLogger(__name__)


def distinct_keys(candidates: Sequence[InspectionRecord]) -> list[str]:
    """
    Return each inspection number once, in order of first occurrence.
    """

    return list(dict.fromkeys(record.inspection_number for record in candidates))


class DeduplicationResolver:
    """
    Splits a candidate batch into new records and duplicates.
    """

    def __init__(self, store: InspectionStore) -> None:
        self._store = store

    def resolve(
        self,
        candidates: Sequence[InspectionRecord],
        owner: OwnerIdentity,
    ) -> ResolutionResult:
        if not candidates:
            return ResolutionResult()

        keys = distinct_keys(candidates)
        try:
            existing_pairs = self._store.find_existing(owner, keys)
        except InspectionStoreError as exc:
            raise StorageUnavailable("Unable to check for existing inspections.") from exc

        existing: dict[str, uuid.UUID] = dict(existing_pairs)
        claimed: set[str] = set()
        new: list[InspectionRecord] = []
        duplicates: list[DuplicateInfo] = []

        for record in candidates:
            key = record.inspection_number
            if key in existing:
                duplicates.append(
                    DuplicateInfo(
                        inspection_number=key,
                        reason=DuplicateReason.EXISTING,
                        existing_id=existing[key],
                    )
                )
            elif key in claimed:
                duplicates.append(
                    DuplicateInfo(
                        inspection_number=key,
                        reason=DuplicateReason.WITHIN_SUBMISSION,
                    )
                )
            else:
                claimed.add(key)
                new.append(record)

        logger.info(
            "Resolved inspections owner=%s candidates=%d new=%d duplicates=%d stored_matches=%d",
            owner,
            len(candidates),
            len(new),
            len(duplicates),
            len(existing),
        )
        return ResolutionResult(new=new, duplicates=duplicates)
