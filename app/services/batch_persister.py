"""
app/services/batch_persister.py

Writes new inspections in bounded, sequential chunks.

A chunk that trips the (owner, inspection_number) unique constraint is
skipped as a whole: another writer stored one of its keys after the
duplicate check ran. That is the expected outcome of two concurrent uploads
of the same file and does not fail the job. Any other storage error does,
because chunks committed before it can no longer be reported reliably.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from app.domain.errors import StorageUnavailable
from app.domain.inspection import (
    InspectionRecord,
    OwnerIdentity,
    PersistedInspection,
    PersistResult,
)
from app.repositories.errors import DuplicateKeyConflictError, InspectionStoreError
from app.repositories.inspection_repository import InspectionStore

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1000


def iter_chunks(
    records: Sequence[InspectionRecord],
    chunk_size: int,
) -> Iterator[Sequence[InspectionRecord]]:
    """
    Yield contiguous slices of at most ``chunk_size`` records, in order.
    """

    size = max(1, chunk_size)
    for start in range(0, len(records), size):
        yield records[start : start + size]


class BatchPersister:
    """
    Persists records chunk by chunk with per-chunk conflict isolation.
    """

    def __init__(self, store: InspectionStore, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._store = store
        self._chunk_size = max(1, chunk_size)

    def persist(
        self,
        records: Sequence[InspectionRecord],
        owner: OwnerIdentity,
        chunk_size: int | None = None,
    ) -> PersistResult:
        size = max(1, chunk_size) if chunk_size is not None else self._chunk_size
        inserted: list[PersistedInspection] = []
        skipped: list[InspectionRecord] = []

        for chunk_number, chunk in enumerate(iter_chunks(records, size), start=1):
            try:
                stored = self._store.insert_many(owner, chunk)
            except DuplicateKeyConflictError:
                logger.warning(
                    "Skipping inspection chunk after unique conflict owner=%s chunk=%d size=%d",
                    owner,
                    chunk_number,
                    len(chunk),
                )
                skipped.extend(chunk)
                continue
            except InspectionStoreError as exc:
                logger.error(
                    "Inspection chunk insert failed owner=%s chunk=%d inserted_so_far=%d: %s",
                    owner,
                    chunk_number,
                    len(inserted),
                    exc,
                )
                raise StorageUnavailable("Unable to persist inspections.") from exc

            inserted.extend(stored)
            logger.debug(
                "Inserted inspection chunk owner=%s chunk=%d rows=%d",
                owner,
                chunk_number,
                len(stored),
            )

        return PersistResult(
            inserted_records=inserted,
            inserted_count=len(inserted),
            skipped_records=skipped,
        )
