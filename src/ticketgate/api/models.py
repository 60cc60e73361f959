"""Pydantic models for REST API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ticketgate.workflow import NO_COMMAND, ReviewerStatus

T = TypeVar("T")

UNASSIGNED = "Unassigned"


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Ticket models


class PullRequestResponse(BaseModel):
    """A pull request referenced from a ticket's comments."""

    url: str
    label: str
    link: str
    executable_command: str


def pull_request_to_response(reference: Any) -> PullRequestResponse:
    """Convert a PullRequestReference to PullRequestResponse."""
    return PullRequestResponse(
        url=reference.url,
        label=reference.label,
        link=reference.link,
        executable_command=reference.alias_command or NO_COMMAND,
    )


class TicketSummaryResponse(BaseModel):
    """Response model for a ticket in a search result."""

    key: str
    summary: str
    status: str
    assignee: str
    pull_requests: list[PullRequestResponse]


def ticket_summary_to_response(ticket: Any) -> TicketSummaryResponse:
    """Convert a TicketSummary to TicketSummaryResponse."""
    return TicketSummaryResponse(
        key=ticket.key,
        summary=ticket.summary,
        status=ticket.status,
        assignee=ticket.assignee or UNASSIGNED,
        pull_requests=[pull_request_to_response(pr) for pr in ticket.pull_requests],
    )


class TicketResponse(TicketSummaryResponse):
    """Response model for a single ticket."""

    description: str | None = None


def ticket_to_response(ticket: Any) -> TicketResponse:
    """Convert a Ticket to TicketResponse."""
    return TicketResponse(
        key=ticket.key,
        summary=ticket.summary,
        status=ticket.status,
        assignee=ticket.assignee or UNASSIGNED,
        description=ticket.description,
        pull_requests=[pull_request_to_response(pr) for pr in ticket.pull_requests],
    )


# Transition models


class TransitionResponse(BaseModel):
    """Response model for a workflow transition."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


def transition_to_response(transition: Any) -> TransitionResponse:
    """Convert a Transition to TransitionResponse."""
    return TransitionResponse.model_validate(transition)


class TransitionRequest(BaseModel):
    """Request model for moving a ticket."""

    status: str = Field(..., min_length=1, max_length=255)


class TransitionResultResponse(BaseModel):
    """Response model for an applied transition."""

    key: str
    transition: TransitionResponse
    message: str


class InvalidTransitionResponse(BaseModel):
    """Error payload listing the transitions that are available instead."""

    key: str
    requested: str
    available: list[str]


# Reviewer models


class ReviewerRequest(BaseModel):
    """Request model for adding a code reviewer to tickets."""

    keys: list[str] = Field(..., min_length=1, max_length=50)
    username: str = Field(..., min_length=1, max_length=255)


class ReviewerResultResponse(BaseModel):
    """Response model for one ticket's reviewer update."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    status: ReviewerStatus
    message: str


def reviewer_result_to_response(result: Any) -> ReviewerResultResponse:
    """Convert a ReviewerResult to ReviewerResultResponse."""
    return ReviewerResultResponse.model_validate(result)


# Page models


class PageResponse(BaseModel):
    """Response model for a Confluence page."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    version: int
    space_key: str
    space_name: str
    labels: list[str]
    last_updated: str | None
    updated_by: str | None
    html_content: str
    markdown_content: str


def page_to_response(page: Any) -> PageResponse:
    """Convert a Page to PageResponse."""
    return PageResponse.model_validate(page)


class PageUpdateRequest(BaseModel):
    """Request model for replacing a page body."""

    content: str = Field(..., min_length=1)
    minor_edit: bool = False


class PageUpdateResponse(BaseModel):
    """Response model for an updated page."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    version: int
    space_key: str
    space_name: str
    last_updated: str | None
    updated_by: str | None


def page_update_to_response(result: Any) -> PageUpdateResponse:
    """Convert a PageUpdateResult to PageUpdateResponse."""
    return PageUpdateResponse.model_validate(result)


class ConnectionStatusResponse(BaseModel):
    """Response model for the Confluence connectivity check."""

    model_config = ConfigDict(from_attributes=True)

    success: bool
    message: str
    url: str
    username: str
    status_code: int | None
    spaces: int


def connection_status_to_response(status: Any) -> ConnectionStatusResponse:
    """Convert a ConnectionStatus to ConnectionStatusResponse."""
    return ConnectionStatusResponse.model_validate(status)


class HealthResponse(BaseModel):
    """Response model for the liveness probe."""

    status: str
    version: str
