"""
app/api/dependencies.py

Shared FastAPI dependencies: storage session, caller identity, throttling.
"""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.rate_limiter import RequestBudgets, SlidingWindowRateLimiter
from app.auth.token_verifier import TokenVerifier, get_token_verifier
from app.domain.errors import RateLimited, Unauthorized
from app.domain.inspection import OwnerIdentity
from app.repositories.inspection_repository import InspectionRepository, InspectionStore
from db.session import Database

bearer_scheme = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage is not available.",
        )
    return database


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """
    Yield a database session for the request and guarantee cleanup.
    """

    yield from database.sessions()


def get_inspection_store(db: Session = Depends(get_db)) -> InspectionStore:
    return InspectionRepository(db)


def get_owner_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> OwnerIdentity:
    """
    Resolve the bearer token to the caller's owner identity or reject with 401.
    """

    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token provided.")
    try:
        return verifier.verify(credentials.credentials)
    except Unauthorized as exc:
        raise _unauthorized(str(exc)) from exc


def enforce_default_rate_limit(
    request: Request,
    owner: OwnerIdentity = Depends(get_owner_identity),
) -> OwnerIdentity:
    _hit(_get_budgets(request).default, owner)
    return owner


def enforce_bulk_rate_limit(
    request: Request,
    owner: OwnerIdentity = Depends(enforce_default_rate_limit),
) -> OwnerIdentity:
    _hit(_get_budgets(request).bulk, owner)
    return owner


def _get_budgets(request: Request) -> RequestBudgets:
    return request.app.state.request_budgets


def _hit(limiter: SlidingWindowRateLimiter, owner: OwnerIdentity) -> None:
    try:
        limiter.hit(owner)
    except RateLimited as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(exc),
            headers={"Retry-After": str(exc.retry_after_seconds)},
        ) from exc


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )
