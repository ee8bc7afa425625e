"""
app/auth/token_verifier.py

Resolves bearer credentials to an owner identity.

Supabase access tokens are verified locally with the project's HS256 JWT
secret. The verified ``email`` claim is the owner identity used to partition
inspection storage.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Protocol

import jwt

from app.config import get_auth_settings
from app.domain.errors import Unauthorized
from app.domain.inspection import OwnerIdentity

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["sub", "email", "exp"]


class TokenVerifier(Protocol):
    """
    Credential verification collaborator.
    """

    def verify(self, token: str) -> OwnerIdentity:
        ...


class SupabaseTokenVerifier:
    """
    Verifies Supabase-issued access tokens with PyJWT.
    """

    def __init__(
        self,
        *,
        jwt_secret: str,
        audience: str = "authenticated",
        supabase_url: str | None = None,
    ) -> None:
        if not jwt_secret:
            raise ValueError("jwt_secret is required.")
        self._jwt_secret = jwt_secret
        self._audience = audience
        self._issuer = f"{supabase_url.rstrip('/')}/auth/v1" if supabase_url else None

    def verify(self, token: str) -> OwnerIdentity:
        """
        Return the verified email for ``token``.

        Raises:
            Unauthorized: token missing, malformed, expired, wrongly signed,
                          issued for another audience/issuer, or without email.
        """
        if not token or not token.strip():
            raise Unauthorized("No token provided.")

        options: dict[str, object] = {"require": _REQUIRED_CLAIMS}
        try:
            payload = jwt.decode(
                token.strip(),
                self._jwt_secret,
                algorithms=["HS256"],
                audience=self._audience,
                issuer=self._issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError as exc:
            logger.info("Rejected expired access token: %s", exc)
            raise Unauthorized("Token has expired.") from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected invalid access token: %s", exc)
            raise Unauthorized("Invalid token.") from exc

        email = payload.get("email")
        if not isinstance(email, str) or not email.strip():
            raise Unauthorized("Token does not identify a user.")

        logger.debug("Verified access token sub=%s", payload.get("sub"))
        return email.strip()


@lru_cache(maxsize=1)
def get_token_verifier() -> TokenVerifier:
    """
    Build and cache the token verifier from environment settings.
    """
    settings = get_auth_settings()
    if not settings.jwt_secret:
        raise RuntimeError("SUPABASE_JWT_SECRET is not set.")
    return SupabaseTokenVerifier(
        jwt_secret=settings.jwt_secret,
        audience=settings.audience,
        supabase_url=settings.supabase_url,
    )
