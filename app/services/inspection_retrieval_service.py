"""
app/services/inspection_retrieval_service.py

Read path for a caller's stored inspections.
"""

from __future__ import annotations

import logging

from app.config import get_ingestion_settings
from app.domain.errors import StorageUnavailable, Unauthorized
from app.domain.inspection import OwnerIdentity, PersistedInspection
from app.repositories.errors import InspectionStoreError
from app.repositories.inspection_repository import InspectionStore

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 1000


class InspectionRetrievalService:
    """
    Lists one owner's inspections, newest first, with a flat row cap.
    """

    def __init__(self, store: InspectionStore, *, limit: int = DEFAULT_LIST_LIMIT) -> None:
        self._store = store
        self._limit = max(1, limit)

    def list_by_owner(self, owner: OwnerIdentity) -> list[PersistedInspection]:
        if not owner or not owner.strip():
            raise Unauthorized("Authenticated owner is required.")

        logger.info("Fetching inspections owner=%s limit=%d", owner, self._limit)
        try:
            rows = self._store.list_by_owner(owner, limit=self._limit)
        except InspectionStoreError as exc:
            logger.error("Failed to fetch inspections owner=%s: %s", owner, exc)
            raise StorageUnavailable("Unable to fetch inspections.") from exc

        return [row for row in rows if row.owner == owner][: self._limit]


def build_inspection_retrieval_service(store: InspectionStore) -> InspectionRetrievalService:
    return InspectionRetrievalService(store, limit=get_ingestion_settings().list_limit)
