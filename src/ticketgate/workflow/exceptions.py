"""Custom exceptions for the Ticket Workflow Orchestrator."""

from __future__ import annotations

from ticketgate.exceptions import TicketGateError


class WorkflowError(TicketGateError):
    """Base exception for workflow errors."""


class InvalidTransitionError(WorkflowError):
    """No available transition matches the requested status.

    Attributes:
        key: Ticket key.
        requested: The status after normalization.
        available: Transition names legal at the time of the call.
    """

    def __init__(self, key: str, requested: str, available: list[str]) -> None:
        self.key = key
        self.requested = requested
        self.available = available
        options = ", ".join(available) if available else "none"
        super().__init__(
            f"No transition to '{requested}' available for {key}. Valid transitions: {options}"
        )
