"""
app/api/routers/inspections.py

Inspection bulk upload and listing endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.api.dependencies import (
    enforce_bulk_rate_limit,
    enforce_default_rate_limit,
    get_inspection_store,
)
from app.domain.errors import StorageUnavailable, Unauthorized, ValidationFailed
from app.domain.inspection import OwnerIdentity
from app.repositories.inspection_repository import InspectionStore
from app.schemas.inspections import BulkIngestResponse, InspectionResponse
from app.services.inspection_ingestion_service import build_inspection_ingestion_service
from app.services.inspection_retrieval_service import build_inspection_retrieval_service

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.post(
    "/bulk",
    response_model=BulkIngestResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_bulk(
    records: list[Any] = Body(..., description="Raw inspection records parsed from a spreadsheet"),
    owner: OwnerIdentity = Depends(enforce_bulk_rate_limit),
    store: InspectionStore = Depends(get_inspection_store),
) -> BulkIngestResponse:
    """
    Store new inspections for the caller and report duplicates.
    """

    service = build_inspection_ingestion_service(store)
    try:
        report = service.ingest(records, owner)
    except ValidationFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except Unauthorized as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except StorageUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to store inspections. The upload can be retried safely.",
        ) from exc

    return BulkIngestResponse.from_report(report)


@router.get("", response_model=list[InspectionResponse])
def list_inspections(
    owner: OwnerIdentity = Depends(enforce_default_rate_limit),
    store: InspectionStore = Depends(get_inspection_store),
) -> list[InspectionResponse]:
    """
    Return the caller's inspections, newest first.
    """

    service = build_inspection_retrieval_service(store)
    try:
        inspections = service.list_by_owner(owner)
    except StorageUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to fetch inspections.",
        ) from exc

    return [InspectionResponse.from_persisted(item) for item in inspections]
