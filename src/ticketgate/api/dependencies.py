"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Request

from ticketgate.auth import AuthGate, AuthHeaders, Credential
from ticketgate.confluence import ConfluenceClient
from ticketgate.exceptions import ServiceNotConfiguredError
from ticketgate.workflow import TicketWorkflow

# Global AuthGate instance (initialized on app startup)
_auth_gate: AuthGate | None = None


def init_auth_gate(gate: AuthGate) -> None:
    """Initialize the global AuthGate instance."""
    global _auth_gate  # noqa: PLW0603
    _auth_gate = gate


def close_auth_gate() -> None:
    """Clear the global AuthGate instance."""
    global _auth_gate  # noqa: PLW0603
    _auth_gate = None


def get_auth_gate() -> Generator[AuthGate, None, None]:
    """Dependency that provides the AuthGate instance."""
    if _auth_gate is None:
        raise RuntimeError("AuthGate not initialized. Call init_auth_gate() first.")
    yield _auth_gate


AuthGateDep = Annotated[AuthGate, Depends(get_auth_gate)]


def require_auth(request: Request, gate: AuthGateDep) -> Credential:
    """Reject the request unless it carries a valid credential.

    Raises:
        AuthRejection: Turned into a 401/403 response by the app.
    """
    return gate.authenticate(AuthHeaders.from_mapping(request.headers))


# Global TicketWorkflow instance (initialized on app startup)
_workflow: TicketWorkflow | None = None


def init_workflow(workflow: TicketWorkflow) -> None:
    """Initialize the global TicketWorkflow instance."""
    global _workflow  # noqa: PLW0603
    _workflow = workflow


def close_workflow() -> None:
    """Clear the global TicketWorkflow instance."""
    global _workflow  # noqa: PLW0603
    _workflow = None


def get_workflow() -> Generator[TicketWorkflow, None, None]:
    """Dependency that provides the TicketWorkflow instance."""
    if _workflow is None:
        raise RuntimeError("TicketWorkflow not initialized. Call init_workflow() first.")
    yield _workflow


WorkflowDep = Annotated[TicketWorkflow, Depends(get_workflow)]

# Global ConfluenceClient instance; stays None when Confluence is not configured
_confluence: ConfluenceClient | None = None


def init_confluence(client: ConfluenceClient | None) -> None:
    """Initialize the global ConfluenceClient instance."""
    global _confluence  # noqa: PLW0603
    _confluence = client


def close_confluence() -> None:
    """Clear the global ConfluenceClient instance."""
    global _confluence  # noqa: PLW0603
    _confluence = None


def get_confluence() -> Generator[ConfluenceClient, None, None]:
    """Dependency that provides the ConfluenceClient instance."""
    if _confluence is None:
        raise ServiceNotConfiguredError("Confluence is not configured")
    yield _confluence


ConfluenceDep = Annotated[ConfluenceClient, Depends(get_confluence)]
