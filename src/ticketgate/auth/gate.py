"""AuthGate - Validates inbound requests before any tool logic runs."""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import threading
import time
from typing import TYPE_CHECKING

from ticketgate.auth.exceptions import (
    InvalidBearerTokenError,
    InvalidKeyError,
    InvalidSignatureError,
    MissingHeadersError,
    ReplayedRequestError,
    StaleTimestampError,
)
from ticketgate.auth.models import (
    API_KEY_HEADER,
    API_SIGNATURE_HEADER,
    API_TIMESTAMP_HEADER,
    BEARER_PREFIX,
    AuthHeaders,
    BearerToken,
    Credential,
    SignedRequest,
)
from ticketgate.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketgate.config import Settings

logger = get_logger("auth")

MAX_AGE_MS = 2 * 60 * 1000  # 2 minutes

# Epoch milliseconds; longer values cannot be within the window
_TIMESTAMP_RE = re.compile(r"[0-9]{1,15}")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def compute_signature(key_id: str, timestamp: str, secret: str) -> str:
    """Base64 HMAC-SHA256 of ``key_id + timestamp`` under ``secret``."""
    digest = hmac.new(
        secret.encode("utf-8"),
        f"{key_id}{timestamp}".encode(),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_request(key_id: str, secret: str, timestamp_ms: int | None = None) -> dict[str, str]:
    """Build the signed-request header triple for a client.

    Args:
        key_id: Client key id sent as ``x-api-key``.
        secret: Shared HMAC secret.
        timestamp_ms: Epoch milliseconds to sign. Defaults to now.

    Returns:
        Headers ready to attach to an outgoing request.
    """
    timestamp = str(now_ms() if timestamp_ms is None else timestamp_ms)
    return {
        API_KEY_HEADER: key_id,
        API_TIMESTAMP_HEADER: timestamp,
        API_SIGNATURE_HEADER: compute_signature(key_id, timestamp, secret),
    }


class ReplayGuard:
    """Remembers accepted signed requests until their timestamp window closes."""

    def __init__(self, window_ms: int = MAX_AGE_MS) -> None:
        self.window_ms = window_ms
        self._seen: dict[tuple[str, str, str], int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._seen)

    def check_and_remember(self, credential: SignedRequest, at_ms: int) -> bool:
        """Record a credential.

        Returns:
            False if the same (key id, timestamp, signature) was already seen
            and has not expired, True otherwise.
        """
        entry = (credential.key_id, credential.timestamp, credential.signature)
        expires_at = int(credential.timestamp) + self.window_ms
        with self._lock:
            self._prune(at_ms)
            if entry in self._seen:
                return False
            self._seen[entry] = expires_at
        return True

    def _prune(self, at_ms: int) -> None:
        expired = [entry for entry, expires_at in self._seen.items() if expires_at < at_ms]
        for entry in expired:
            del self._seen[entry]


class AuthGate:
    """Dual-scheme request authentication.

    Schemes are tried in a fixed order:

    1. ``Authorization: Bearer <token>``. When the header carries the bearer
       prefix the token decides the outcome; a mismatch never falls through
       to the signed scheme.
    2. ``x-api-key`` / ``x-api-timestamp`` / ``x-api-signature``, checked in
       order: presence, key id, timestamp window, HMAC signature.

    The gate keeps no per-request state unless a ReplayGuard is attached.
    """

    def __init__(
        self,
        bearer_token: str = "",
        api_key: str = "",
        api_secret: str = "",
        max_age_ms: int = MAX_AGE_MS,
        clock: Callable[[], int] = now_ms,
        replay_guard: ReplayGuard | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            bearer_token: Accepted static token. Empty disables the bearer scheme.
            api_key: Accepted client key id.
            api_secret: Shared HMAC secret. Empty disables the signed scheme.
            max_age_ms: Allowed distance between request timestamp and now.
            clock: Returns the current time in epoch milliseconds.
            replay_guard: Optional seen-signature set.
        """
        self._bearer_token = bearer_token
        self._api_key = api_key
        self._api_secret = api_secret
        self.max_age_ms = max_age_ms
        self._clock = clock
        self._replay_guard = replay_guard

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthGate:
        """Build a gate from process settings."""
        replay_guard = ReplayGuard() if settings.replay_protection else None
        return cls(
            bearer_token=settings.bearer_token,
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            replay_guard=replay_guard,
        )

    def authenticate(self, headers: AuthHeaders) -> Credential:
        """Accept or reject a request.

        Args:
            headers: Auth-relevant header values of the request.

        Returns:
            The credential the request was accepted with.

        Raises:
            AuthRejection: One of its subclasses, naming the failed check.
        """
        if headers.authorization and headers.authorization.startswith(BEARER_PREFIX):
            return self._check_bearer(headers.authorization[len(BEARER_PREFIX) :])
        return self._check_signed(headers)

    def _check_bearer(self, token: str) -> BearerToken:
        if not self._bearer_token or not hmac.compare_digest(
            token.encode("utf-8"), self._bearer_token.encode("utf-8")
        ):
            logger.warning("Rejected request: invalid bearer token")
            raise InvalidBearerTokenError()
        return BearerToken(token=token)

    def _check_signed(self, headers: AuthHeaders) -> SignedRequest:
        if not headers.key_id or not headers.timestamp or not headers.signature:
            logger.warning("Rejected request: missing authentication headers")
            raise MissingHeadersError()

        if not self._api_key or headers.key_id != self._api_key:
            logger.warning("Rejected request: invalid API key")
            raise InvalidKeyError()

        current = self._clock()
        if not _TIMESTAMP_RE.fullmatch(headers.timestamp) or (
            abs(current - int(headers.timestamp)) > self.max_age_ms
        ):
            logger.warning("Rejected request: stale or invalid timestamp %r", headers.timestamp)
            raise StaleTimestampError()

        if not self._api_secret:
            logger.warning("Rejected request: no signing secret configured")
            raise InvalidSignatureError()
        expected = compute_signature(headers.key_id, headers.timestamp, self._api_secret)
        if not hmac.compare_digest(headers.signature.encode("utf-8"), expected.encode("ascii")):
            logger.warning("Rejected request: invalid signature for key %s", headers.key_id)
            raise InvalidSignatureError()

        credential = SignedRequest(
            key_id=headers.key_id,
            timestamp=headers.timestamp,
            signature=headers.signature,
        )
        if self._replay_guard is not None and not self._replay_guard.check_and_remember(
            credential, current
        ):
            logger.warning("Rejected request: replayed signature for key %s", headers.key_id)
            raise ReplayedRequestError()

        return credential
