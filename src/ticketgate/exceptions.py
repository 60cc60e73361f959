"""Exceptions shared across ticketgate components."""

from __future__ import annotations


class TicketGateError(Exception):
    """Base exception for all ticketgate errors."""


class RemoteFetchError(TicketGateError):
    """An upstream call failed, returned an error status or a malformed body.

    Attributes:
        operation: Name of the remote operation, e.g. "issue-read".
        status_code: Upstream HTTP status, or None for transport/shape errors.
        detail: Upstream error detail. Logged, never returned to API callers.
    """

    def __init__(self, operation: str, status_code: int | None = None, detail: str = "") -> None:
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        status = status_code if status_code is not None else "no status"
        super().__init__(f"{operation} failed: {status} - {detail}")


class ServiceNotConfiguredError(TicketGateError):
    """An optional upstream service was requested but has no configuration."""
