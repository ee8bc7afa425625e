from __future__ import annotations

import time
import unittest

import jwt

from app.auth.token_verifier import SupabaseTokenVerifier
from app.domain.errors import Unauthorized

SECRET = "test-secret-that-is-at-least-32-bytes-long"
SUPABASE_URL = "https://project.supabase.co"


def _token(secret: str = SECRET, **overrides: object) -> str:
    claims: dict[str, object] = {
        "sub": "4c1f2b8e-0000-0000-0000-000000000001",
        "email": "ana@example.com",
        "aud": "authenticated",
        "iss": f"{SUPABASE_URL}/auth/v1",
        "exp": int(time.time()) + 300,
        "iat": int(time.time()),
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, secret, algorithm="HS256")


class TestSupabaseTokenVerifier(unittest.TestCase):
    def setUp(self) -> None:
        self.verifier = SupabaseTokenVerifier(jwt_secret=SECRET, supabase_url=SUPABASE_URL)

    def test_valid_token_yields_email(self) -> None:
        self.assertEqual(self.verifier.verify(_token()), "ana@example.com")

    def test_rejects_expired_token(self) -> None:
        with self.assertRaises(Unauthorized):
            self.verifier.verify(_token(exp=int(time.time()) - 10))

    def test_rejects_wrong_signature(self) -> None:
        with self.assertRaises(Unauthorized):
            self.verifier.verify(_token(secret="another-secret-that-is-32-bytes-long!!"))

    def test_rejects_wrong_audience(self) -> None:
        with self.assertRaises(Unauthorized):
            self.verifier.verify(_token(aud="anon"))

    def test_rejects_wrong_issuer(self) -> None:
        with self.assertRaises(Unauthorized):
            self.verifier.verify(_token(iss="https://elsewhere.supabase.co/auth/v1"))

    def test_rejects_missing_email(self) -> None:
        with self.assertRaises(Unauthorized):
            self.verifier.verify(_token(email=None))

    def test_rejects_blank_email(self) -> None:
        with self.assertRaises(Unauthorized):
            self.verifier.verify(_token(email="  "))

    def test_rejects_garbage_and_empty_tokens(self) -> None:
        for token in ("", "   ", "not.a.jwt"):
            with self.assertRaises(Unauthorized):
                self.verifier.verify(token)

    def test_issuer_is_optional_when_url_not_configured(self) -> None:
        verifier = SupabaseTokenVerifier(jwt_secret=SECRET)
        self.assertEqual(verifier.verify(_token(iss=None)), "ana@example.com")

    def test_requires_secret(self) -> None:
        with self.assertRaises(ValueError):
            SupabaseTokenVerifier(jwt_secret="")


if __name__ == "__main__":
    unittest.main()
