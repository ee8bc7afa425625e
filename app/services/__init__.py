"""
app/services package marker.
"""

from app.services.batch_persister import BatchPersister
from app.services.deduplication_resolver import DeduplicationResolver
from app.services.inspection_ingestion_service import (
    InspectionIngestionService,
    build_inspection_ingestion_service,
)
from app.services.inspection_retrieval_service import (
    InspectionRetrievalService,
    build_inspection_retrieval_service,
)

__all__ = [
    "BatchPersister",
    "DeduplicationResolver",
    "InspectionIngestionService",
    "build_inspection_ingestion_service",
    "InspectionRetrievalService",
    "build_inspection_retrieval_service",
]
