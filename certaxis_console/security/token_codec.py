"""
Token Codec - Unverified bearer credential inspection

Module: security.token_codec
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Expiration claim extraction without signature verification
  - Fail-closed expiry check
  - Identity claim extraction for the user profile

ARCHITECTURE:
TokenCodec reads the payload of a JWT issued by the CertAxis backend:
  - Signature trust is the backend's responsibility, the console only
    needs the `exp` claim to decide when to drop the session
  - Any decoding problem is reported as "expired"

SECURITY NOTES:
- Never use decoded claims for authorization decisions
- All times in UTC
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import jwt


class TokenCodecError(Exception):
    """Base token codec error"""
    pass


class CredentialMalformed(TokenCodecError):
    """Credential cannot be decoded or lacks a usable expiration claim"""
    pass


class CredentialExpired(TokenCodecError):
    """Credential expiration instant has passed"""
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    Decodes bearer credentials without verifying them.

    The clock is injectable so expiry decisions can be tested
    deterministically.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        leeway: float = 0.0,
    ):
        """
        Initialize token codec

        Args:
            clock: Returns the current aware datetime
            leeway: Seconds subtracted from `exp` before comparing
        """
        self.logger = logging.getLogger("security.token_codec")
        self.clock = clock
        self.leeway = leeway

    def decode_claims(self, token: str) -> Dict[str, Any]:
        """
        Decode token payload WITHOUT verification

        Args:
            token: JWT token string

        Returns:
            Decoded payload dict

        Raises:
            CredentialMalformed: If token is not a decodable JWT
        """
        if not token or not isinstance(token, str):
            raise CredentialMalformed("Token must be non-empty string")

        try:
            return jwt.decode(
                token,
                options={"verify_signature": False, "verify_exp": False},
            )
        except jwt.InvalidTokenError as e:
            raise CredentialMalformed(f"Cannot decode token: {e}")

    def expires_at(self, token: str) -> datetime:
        """
        Extract the expiration instant

        Raises:
            CredentialMalformed: If token or its `exp` claim is unusable
        """
        exp = self.decode_claims(token).get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise CredentialMalformed("Missing or non-numeric 'exp' claim")
        try:
            exp = float(exp)
            if not math.isfinite(exp):
                raise CredentialMalformed("Non-finite 'exp' claim")
            return datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise CredentialMalformed(f"Invalid 'exp' timestamp: {e}")

    def is_expired(self, token: Optional[str]) -> bool:
        """
        Check whether the credential must no longer be honored

        Never raises: a malformed token, or one without an expiration
        claim, is reported as expired.
        """
        try:
            expires = self.expires_at(token)
        except CredentialMalformed as e:
            self.logger.debug(f"Treating credential as expired: {e}")
            return True

        return expires.timestamp() - self.leeway <= self.clock().timestamp()

    def ensure_valid(self, token: Optional[str]) -> str:
        """
        Return the token if it is still valid

        Raises:
            CredentialExpired: If the token is expired or malformed
        """
        if self.is_expired(token):
            raise CredentialExpired("Credential expired")
        return token

    def identity_claims(self, token: str) -> Dict[str, str]:
        """
        Extract identity fields confirmed by the server

        Returns:
            Subset of {"id", "name"} found in the payload;
            empty when the token cannot be decoded
        """
        try:
            claims = self.decode_claims(token)
        except CredentialMalformed:
            return {}

        identity = {}
        for key, sources in (
            ("id", ("userId", "id", "sub")),
            ("name", ("name", "displayName")),
        ):
            for source in sources:
                value = claims.get(source)
                if isinstance(value, (str, int)) and not isinstance(value, bool) and value != "":
                    identity[key] = str(value)
                    break
        return identity


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest
    from datetime import timedelta

    class TestTokenCodec(unittest.TestCase):
        """Test suite for TokenCodec"""

        def setUp(self):
            """Setup before each test"""
            self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)
            self.codec = TokenCodec(clock=lambda: self.now)

        def _token(self, **claims):
            return jwt.encode(claims, "console-test-secret-at-least-32-chars", algorithm="HS256")

        def test_future_exp_not_expired(self):
            """Test token expiring in the future is valid"""
            token = self._token(exp=int((self.now + timedelta(hours=1)).timestamp()))
            self.assertFalse(self.codec.is_expired(token))

        def test_past_exp_expired(self):
            """Test token expired one second ago"""
            token = self._token(exp=int((self.now - timedelta(seconds=1)).timestamp()))
            self.assertTrue(self.codec.is_expired(token))

        def test_malformed_token_expired(self):
            """Test malformed tokens fail closed"""
            for token in ("", "garbage", "a.b.c", None):
                self.assertTrue(self.codec.is_expired(token))

    unittest.main()
