"""Custom exceptions for the Authentication Gate."""

from ticketgate.exceptions import TicketGateError


class AuthRejection(TicketGateError):
    """Base exception for rejected requests.

    Attributes:
        reason: Caller-facing reason. Never contains credential material.
        status_code: HTTP status to answer with.
    """

    reason = "Unauthorized"
    status_code = 403

    def __init__(self, reason: str | None = None) -> None:
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class MissingHeadersError(AuthRejection):
    """Neither a bearer token nor the full signed-request header triple was sent."""

    reason = "Missing authentication headers"
    status_code = 401


class InvalidBearerTokenError(AuthRejection):
    """Bearer token does not match the configured token."""

    reason = "Invalid bearer token"


class InvalidKeyError(AuthRejection):
    """Client key id does not match the configured API key."""

    reason = "Invalid API key"


class StaleTimestampError(AuthRejection):
    """Timestamp is unparseable or outside the accepted window."""

    reason = "Timestamp too old or invalid"


class InvalidSignatureError(AuthRejection):
    """HMAC signature does not match."""

    reason = "Invalid signature"


class ReplayedRequestError(AuthRejection):
    """Signed request was already accepted once inside the window."""

    reason = "Request already used"
