"""Authentication Gate - Bearer token or HMAC-signed request validation."""

from ticketgate.auth.exceptions import (
    AuthRejection,
    InvalidBearerTokenError,
    InvalidKeyError,
    InvalidSignatureError,
    MissingHeadersError,
    ReplayedRequestError,
    StaleTimestampError,
)
from ticketgate.auth.gate import (
    MAX_AGE_MS,
    AuthGate,
    ReplayGuard,
    compute_signature,
    now_ms,
    sign_request,
)
from ticketgate.auth.models import AuthHeaders, BearerToken, Credential, SignedRequest

__all__ = [
    "MAX_AGE_MS",
    "AuthGate",
    "AuthHeaders",
    "AuthRejection",
    "BearerToken",
    "Credential",
    "InvalidBearerTokenError",
    "InvalidKeyError",
    "InvalidSignatureError",
    "MissingHeadersError",
    "ReplayGuard",
    "ReplayedRequestError",
    "SignedRequest",
    "StaleTimestampError",
    "compute_signature",
    "now_ms",
    "sign_request",
]
