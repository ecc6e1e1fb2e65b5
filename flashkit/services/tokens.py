"""Signed flash tokens (itsdangerous, HMAC-SHA256 with salted key derivation).

A token carries a mapping of flash messages for connections that have no
server-side session. The signing key is derived from ``secret_key_base`` and a
purpose salt, so a token minted for one salt never verifies under another.
Verification fails closed: any tampering, expiry or malformed payload returns
``None`` rather than raising.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping

from itsdangerous import BadData, URLSafeTimedSerializer

from flashkit.exceptions import ConfigurationError
from flashkit.utils.keys import normalize_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 60  # seconds
FLASH_COOKIE_NAME = "__flash_token__"
MAX_COOKIE_SIZE = 4096  # bytes browsers accept for name, value and attributes
COOKIE_ATTRIBUTE_MARGIN = 128  # "; HttpOnly; Max-Age=N; Path=/; SameSite=lax; Secure" and some slack


def token_budget(cookie_name: str) -> int:
    """Largest token that still fits one cookie named ``cookie_name``."""
    return MAX_COOKIE_SIZE - len(cookie_name) - 1 - COOKIE_ATTRIBUTE_MARGIN


MAX_TOKEN_SIZE = token_budget(FLASH_COOKIE_NAME)


def _messages_from_payload(payload: object) -> dict[str, str] | None:
    """Accept only a flat mapping of string keys to string values."""
    if not isinstance(payload, dict):
        return None
    messages: dict[str, str] = {}
    for key, value in payload.items():
        if not isinstance(key, str) or not isinstance(value, str):
            return None
        messages[key] = value
    return messages


class TokenCodec:
    """Sign and verify flash payloads for one (secret, salt) pair."""

    def __init__(
        self,
        secret_key_base: str,
        salt: str,
        max_age: int = DEFAULT_MAX_AGE,
        max_size: int = MAX_TOKEN_SIZE,
    ) -> None:
        if not secret_key_base:
            raise ConfigurationError("secret_key_base is required to sign flash tokens")
        if not salt:
            raise ConfigurationError("A signing salt is required to sign flash tokens")
        self.salt = salt
        self.max_age = max_age
        self.max_size = max_size
        self._serializer = URLSafeTimedSerializer(
            secret_key_base,
            salt=salt,
            signer_kwargs={"key_derivation": "hmac", "digest_method": hashlib.sha256},
        )

    def sign(self, payload: Mapping) -> str:
        """Return an opaque, URL/cookie safe token for ``payload``."""
        messages: dict[str, str] = {}
        for key, value in payload.items():
            if not isinstance(value, str):
                raise TypeError(f"Flash values must be strings, got {type(value).__name__}")
            messages[normalize_key(key)] = value

        token = self._serializer.dumps(messages)
        if len(token.encode("ascii")) > self.max_size:
            raise ValueError(
                f"Signed flash token is {len(token)} bytes, over the {self.max_size} bytes"
                " left for it in one cookie"
            )
        return token

    def verify(self, token: str | None) -> dict[str, str] | None:
        """Return the decoded messages, or None when the token is not trustworthy."""
        if not token:
            return None
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except BadData as exc:
            logger.debug("Rejected flash token (salt=%s): %s", self.salt, exc.__class__.__name__)
            return None

        messages = _messages_from_payload(payload)
        if messages is None:
            logger.debug("Rejected flash token (salt=%s): unexpected payload shape", self.salt)
        return messages


def sign_token(secret_key_base: str, salt: str, payload: Mapping) -> str:
    """Sign ``payload`` for ``salt``."""
    return TokenCodec(secret_key_base, salt).sign(payload)


def verify_token(
    secret_key_base: str, salt: str, token: str | None, max_age: int = DEFAULT_MAX_AGE
) -> dict[str, str] | None:
    """Verify ``token`` for ``salt``; None when tampered, stale or malformed."""
    return TokenCodec(secret_key_base, salt, max_age=max_age).verify(token)
