"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ticketgate import __version__
from ticketgate.api.dependencies import (
    close_auth_gate,
    close_confluence,
    close_workflow,
    init_auth_gate,
    init_confluence,
    init_workflow,
)
from ticketgate.api.models import APIResponse, HealthResponse, InvalidTransitionResponse
from ticketgate.api.routes import pages, searches, tickets
from ticketgate.auth import AuthGate, AuthRejection
from ticketgate.config import Settings
from ticketgate.confluence import ConfluenceClient
from ticketgate.exceptions import RemoteFetchError, ServiceNotConfiguredError, TicketGateError
from ticketgate.jira import JiraClient
from ticketgate.logging import get_logger
from ticketgate.workflow import InvalidTransitionError, TicketWorkflow

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings: Settings = app.state.settings
    if settings is None:
        settings = Settings.from_env()
    transport: httpx.AsyncBaseTransport | None = app.state.transport

    init_auth_gate(AuthGate.from_settings(settings))

    jira = JiraClient(
        base_url=settings.jira_base_url,
        email=settings.jira_email,
        api_token=settings.jira_api_token,
        transport=transport,
    )
    init_workflow(TicketWorkflow.from_settings(jira, settings))

    confluence = None
    if settings.confluence_enabled:
        confluence = ConfluenceClient(
            host=settings.confluence_host,
            api_token=settings.confluence_api_token,
            username=settings.confluence_username,
            transport=transport,
        )
    init_confluence(confluence)

    logger.info(
        "ticketgate started (jira=%s, confluence=%s, replay_protection=%s)",
        settings.jira_base_url,
        settings.confluence_host or "disabled",
        settings.replay_protection,
    )

    yield
    # Shutdown
    await jira.close()
    if confluence is not None:
        await confluence.close()
    close_confluence()
    close_workflow()
    close_auth_gate()


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Process settings. Read from the environment at startup when omitted.
        transport: Optional httpx transport for the upstream clients (for testing).
    """
    app = FastAPI(
        title="ticketgate API",
        description="Authenticated Jira and Confluence tools for agents",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.transport = transport

    # Exception handlers
    @app.exception_handler(AuthRejection)
    async def auth_rejection_handler(_request: Request, exc: AuthRejection) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=APIResponse[None](data=None, error=exc.reason).model_dump(),
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        _request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=APIResponse[InvalidTransitionResponse](
                data=InvalidTransitionResponse(
                    key=exc.key, requested=exc.requested, available=exc.available
                ),
                error=str(exc),
            ).model_dump(),
        )

    @app.exception_handler(RemoteFetchError)
    async def remote_fetch_error_handler(_request: Request, exc: RemoteFetchError) -> JSONResponse:
        logger.error("Upstream failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=APIResponse[None](data=None, error="Upstream request failed").model_dump(),
        )

    @app.exception_handler(ServiceNotConfiguredError)
    async def not_configured_handler(
        _request: Request, exc: ServiceNotConfiguredError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    @app.exception_handler(TicketGateError)
    async def ticketgate_error_handler(_request: Request, exc: TicketGateError) -> JSONResponse:
        logger.error("Unhandled ticketgate error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        """Liveness probe. Does not require authentication."""
        return HealthResponse(status="ok", version=__version__)

    # Include routers
    app.include_router(tickets.router, prefix="/api/v1")
    app.include_router(searches.router, prefix="/api/v1")
    app.include_router(pages.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
