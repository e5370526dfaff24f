"""Unit tests for app.core.security: bcrypt hashing and JWT mint/verify."""

import unittest
from datetime import timedelta

import jwt

from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from tests.support import make_settings


class TestPasswordHashing(unittest.TestCase):
    """hash_password is salted and one-way; verify_password checks against the stored hash."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("pw123456")
        self.assertNotEqual(hashed, "pw123456")
        self.assertTrue(hashed.startswith("$2b$10$"))
        self.assertTrue(verify_password("pw123456", hashed))

    def test_wrong_password_fails(self) -> None:
        hashed = hash_password("pw123456")
        self.assertFalse(verify_password("pw1234567", hashed))

    def test_same_password_gets_different_salts(self) -> None:
        self.assertNotEqual(hash_password("same"), hash_password("same"))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("pw123456", "not-a-bcrypt-hash"))


class TestAccessToken(unittest.TestCase):
    """create_access_token embeds id, email and a role snapshot; decode rejects bad tokens."""

    def setUp(self) -> None:
        self.settings = make_settings()

    def test_claims_round_trip(self) -> None:
        token = create_access_token(7, "a@x.com", ["ops", "superadmin"], self.settings)
        claims = decode_access_token(token, self.settings)
        self.assertEqual(claims["sub"], "7")
        self.assertEqual(claims["email"], "a@x.com")
        self.assertEqual(claims["roles"], ["ops", "superadmin"])
        self.assertIn("exp", claims)
        self.assertIn("iat", claims)

    def test_default_lifetime_is_24_hours(self) -> None:
        token = create_access_token(1, "a@x.com", [], self.settings)
        claims = decode_access_token(token, self.settings)
        self.assertEqual(claims["exp"] - claims["iat"], 24 * 60 * 60)

    def test_expired_token_is_rejected(self) -> None:
        token = create_access_token(
            1, "a@x.com", [], self.settings, expires_delta=timedelta(seconds=-1)
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token, self.settings)

    def test_token_signed_with_other_secret_is_rejected(self) -> None:
        other = make_settings(JWT_SECRET="another-secret")
        token = create_access_token(1, "a@x.com", [], other)
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(token, self.settings)

    def test_garbage_token_is_rejected(self) -> None:
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token("not.a.jwt", self.settings)

    def test_token_without_sub_is_rejected(self) -> None:
        token = jwt.encode(
            {"email": "a@x.com", "exp": 9999999999},
            "test-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token, self.settings)


if __name__ == "__main__":
    unittest.main()
