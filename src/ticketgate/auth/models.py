"""Data models for the Authentication Gate."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

AUTHORIZATION_HEADER = "authorization"
API_KEY_HEADER = "x-api-key"
API_TIMESTAMP_HEADER = "x-api-timestamp"
API_SIGNATURE_HEADER = "x-api-signature"

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthHeaders:
    """The header values the gate looks at. Any of them may be missing."""

    authorization: str | None = None
    key_id: str | None = None
    timestamp: str | None = None
    signature: str | None = None

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str]) -> AuthHeaders:
        """Pick auth headers out of a header mapping, ignoring name case.

        A repeated header keeps its first value.
        """
        lowered: dict[str, str] = {}
        for name, value in headers.items():
            lowered.setdefault(name.lower(), value)
        return cls(
            authorization=lowered.get(AUTHORIZATION_HEADER),
            key_id=lowered.get(API_KEY_HEADER),
            timestamp=lowered.get(API_TIMESTAMP_HEADER),
            signature=lowered.get(API_SIGNATURE_HEADER),
        )


@dataclass(frozen=True)
class BearerToken:
    """Static bearer credential."""

    token: str


@dataclass(frozen=True)
class SignedRequest:
    """HMAC-signed credential over ``key_id + timestamp``."""

    key_id: str
    timestamp: str
    signature: str


Credential = BearerToken | SignedRequest
