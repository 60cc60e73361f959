"""Unit tests for AuthGate."""

import pytest
from starlette.datastructures import Headers

from ticketgate.auth import (
    MAX_AGE_MS,
    AuthGate,
    AuthHeaders,
    BearerToken,
    InvalidBearerTokenError,
    InvalidKeyError,
    InvalidSignatureError,
    MissingHeadersError,
    ReplayedRequestError,
    ReplayGuard,
    SignedRequest,
    StaleTimestampError,
    compute_signature,
    sign_request,
)
from ticketgate.config import Settings

NOW_MS = 1_700_000_000_000
BEARER = "static-token"
KEY = "client-key"
SECRET = "shared-secret"


@pytest.fixture
def gate() -> AuthGate:
    """Create an AuthGate with a frozen clock."""
    return AuthGate(
        bearer_token=BEARER,
        api_key=KEY,
        api_secret=SECRET,
        clock=lambda: NOW_MS,
    )


def _signed(timestamp_ms: int = NOW_MS, key: str = KEY, secret: str = SECRET) -> AuthHeaders:
    return AuthHeaders.from_mapping(sign_request(key, secret, timestamp_ms))


@pytest.mark.unit
class TestBearerScheme:
    """Tests for the bearer token scheme."""

    def test_correct_token_accepted(self, gate: AuthGate) -> None:
        """A matching bearer token is accepted."""
        credential = gate.authenticate(AuthHeaders(authorization=f"Bearer {BEARER}"))

        assert credential == BearerToken(token=BEARER)

    def test_wrong_token_rejected(self, gate: AuthGate) -> None:
        """A mismatching bearer token is rejected."""
        with pytest.raises(InvalidBearerTokenError) as exc_info:
            gate.authenticate(AuthHeaders(authorization="Bearer nope"))

        assert exc_info.value.status_code == 403
        assert exc_info.value.reason == "Invalid bearer token"

    def test_wrong_token_does_not_fall_through_to_signature(self, gate: AuthGate) -> None:
        """A bad bearer token is rejected even when valid HMAC headers are present."""
        signed = _signed()
        headers = AuthHeaders(
            authorization="Bearer nope",
            key_id=signed.key_id,
            timestamp=signed.timestamp,
            signature=signed.signature,
        )

        with pytest.raises(InvalidBearerTokenError):
            gate.authenticate(headers)

    def test_empty_token_rejected_when_bearer_not_configured(self) -> None:
        """An unconfigured bearer token never matches, not even an empty one."""
        gate = AuthGate(api_key=KEY, api_secret=SECRET, clock=lambda: NOW_MS)

        with pytest.raises(InvalidBearerTokenError):
            gate.authenticate(AuthHeaders(authorization="Bearer "))

    def test_non_bearer_authorization_uses_signed_scheme(self, gate: AuthGate) -> None:
        """An Authorization header without the Bearer prefix is ignored."""
        signed = _signed()
        headers = AuthHeaders(
            authorization="Basic Zm9vOmJhcg==",
            key_id=signed.key_id,
            timestamp=signed.timestamp,
            signature=signed.signature,
        )

        credential = gate.authenticate(headers)

        assert isinstance(credential, SignedRequest)


@pytest.mark.unit
class TestSignedScheme:
    """Tests for the HMAC signed-request scheme."""

    def test_valid_signature_accepted(self, gate: AuthGate) -> None:
        """A correctly signed fresh request is accepted."""
        credential = gate.authenticate(_signed())

        assert credential == SignedRequest(
            key_id=KEY,
            timestamp=str(NOW_MS),
            signature=compute_signature(KEY, str(NOW_MS), SECRET),
        )

    @pytest.mark.parametrize("missing", ["key_id", "timestamp", "signature"])
    def test_missing_header_rejected(self, gate: AuthGate, missing: str) -> None:
        """Each of the three headers is required."""
        signed = _signed()
        values = {
            "key_id": signed.key_id,
            "timestamp": signed.timestamp,
            "signature": signed.signature,
        }
        values[missing] = None

        with pytest.raises(MissingHeadersError) as exc_info:
            gate.authenticate(AuthHeaders(**values))

        assert exc_info.value.status_code == 401

    def test_no_headers_at_all_rejected(self, gate: AuthGate) -> None:
        """A request without any credential is missing headers."""
        with pytest.raises(MissingHeadersError):
            gate.authenticate(AuthHeaders())

    def test_wrong_key_rejected(self, gate: AuthGate) -> None:
        """An unknown client key id is rejected before the signature is checked."""
        with pytest.raises(InvalidKeyError):
            gate.authenticate(_signed(key="other-key"))

    def test_timestamp_at_window_edge_accepted(self, gate: AuthGate) -> None:
        """Exactly 120000 ms of skew is still accepted."""
        gate.authenticate(_signed(timestamp_ms=NOW_MS - MAX_AGE_MS))
        gate.authenticate(_signed(timestamp_ms=NOW_MS + MAX_AGE_MS))

    @pytest.mark.parametrize("offset", [-(MAX_AGE_MS + 1), MAX_AGE_MS + 1])
    def test_stale_timestamp_rejected_even_with_valid_signature(
        self, gate: AuthGate, offset: int
    ) -> None:
        """Skew beyond the window is rejected although the signature is valid."""
        with pytest.raises(StaleTimestampError):
            gate.authenticate(_signed(timestamp_ms=NOW_MS + offset))

    def test_unparseable_timestamp_rejected(self, gate: AuthGate) -> None:
        """A non-numeric timestamp is rejected as invalid."""
        headers = AuthHeaders(
            key_id=KEY,
            timestamp="yesterday",
            signature=compute_signature(KEY, "yesterday", SECRET),
        )

        with pytest.raises(StaleTimestampError) as exc_info:
            gate.authenticate(headers)

        assert exc_info.value.reason == "Timestamp too old or invalid"

    @pytest.mark.parametrize("timestamp", ["9" * 5000, "1" * 16, "\u0661\u0662\u0663"])
    def test_oversized_or_non_ascii_timestamp_rejected(
        self, gate: AuthGate, timestamp: str
    ) -> None:
        """Timestamps that are too long or not ASCII digits are invalid, not errors."""
        headers = AuthHeaders(
            key_id=KEY,
            timestamp=timestamp,
            signature=compute_signature(KEY, timestamp, SECRET),
        )

        with pytest.raises(StaleTimestampError):
            gate.authenticate(headers)

    def test_wrong_secret_rejected(self, gate: AuthGate) -> None:
        """A signature made with another secret is rejected."""
        with pytest.raises(InvalidSignatureError):
            gate.authenticate(_signed(secret="wrong-secret"))

    def test_signature_over_other_timestamp_rejected(self, gate: AuthGate) -> None:
        """The signature must cover the timestamp actually sent."""
        headers = AuthHeaders(
            key_id=KEY,
            timestamp=str(NOW_MS),
            signature=compute_signature(KEY, str(NOW_MS - 1), SECRET),
        )

        with pytest.raises(InvalidSignatureError):
            gate.authenticate(headers)

    def test_requests_are_independent(self, gate: AuthGate) -> None:
        """Without replay protection the same signed request is accepted twice."""
        headers = _signed()

        gate.authenticate(headers)
        gate.authenticate(headers)


@pytest.mark.unit
class TestReplayGuard:
    """Tests for optional replay protection."""

    def test_replay_rejected(self) -> None:
        """A signed request seen before inside the window is rejected."""
        gate = AuthGate(
            api_key=KEY,
            api_secret=SECRET,
            clock=lambda: NOW_MS,
            replay_guard=ReplayGuard(),
        )
        headers = _signed()

        gate.authenticate(headers)
        with pytest.raises(ReplayedRequestError):
            gate.authenticate(headers)

    def test_fresh_signature_accepted(self) -> None:
        """Different timestamps produce different requests."""
        gate = AuthGate(
            api_key=KEY,
            api_secret=SECRET,
            clock=lambda: NOW_MS,
            replay_guard=ReplayGuard(),
        )

        gate.authenticate(_signed(timestamp_ms=NOW_MS))
        gate.authenticate(_signed(timestamp_ms=NOW_MS - 1))

    def test_expired_entries_pruned(self) -> None:
        """Entries are forgotten once their window has closed."""
        guard = ReplayGuard(window_ms=100)
        credential = SignedRequest(key_id=KEY, timestamp="1000", signature="sig")

        assert guard.check_and_remember(credential, 1000) is True
        assert len(guard) == 1
        other = SignedRequest(key_id=KEY, timestamp="2000", signature="sig2")
        assert guard.check_and_remember(other, 2000) is True
        assert len(guard) == 1


@pytest.mark.unit
class TestAuthHeaders:
    """Tests for header extraction."""

    def test_header_names_are_case_insensitive(self) -> None:
        """Header lookup ignores name case."""
        headers = AuthHeaders.from_mapping(
            {
                "AUTHORIZATION": "Bearer x",
                "X-Api-Key": "k",
                "X-API-TIMESTAMP": "1",
                "x-api-signature": "s",
            }
        )

        assert headers == AuthHeaders(authorization="Bearer x", key_id="k", timestamp="1", signature="s")

    def test_repeated_header_keeps_first_value(self) -> None:
        """With duplicated headers the first occurrence is used."""
        raw = Headers(
            raw=[
                (b"x-api-key", b"first"),
                (b"X-API-KEY", b"second"),
                (b"authorization", b"Bearer one"),
                (b"authorization", b"Bearer two"),
            ]
        )

        headers = AuthHeaders.from_mapping(raw)

        assert headers.key_id == "first"
        assert headers.authorization == "Bearer one"

    def test_sign_request_builds_header_triple(self) -> None:
        """sign_request produces the three signed headers."""
        headers = sign_request(KEY, SECRET, 42)

        assert headers == {
            "x-api-key": KEY,
            "x-api-timestamp": "42",
            "x-api-signature": compute_signature(KEY, "42", SECRET),
        }


@pytest.mark.unit
def test_from_settings_enables_replay_guard(settings: Settings) -> None:
    """Replay protection follows the settings flag."""
    gate = AuthGate.from_settings(
        Settings(
            jira_base_url=settings.jira_base_url,
            api_key=KEY,
            api_secret=SECRET,
            replay_protection=True,
        )
    )

    assert gate._replay_guard is not None
    assert AuthGate.from_settings(settings)._replay_guard is None
