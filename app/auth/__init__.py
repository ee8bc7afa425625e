"""
app/auth package marker.
"""

from app.auth.token_verifier import SupabaseTokenVerifier, TokenVerifier, get_token_verifier

__all__ = [
    "SupabaseTokenVerifier",
    "TokenVerifier",
    "get_token_verifier",
]
