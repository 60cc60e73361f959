"""Ticket read, transition and reviewer endpoints."""

from fastapi import APIRouter, Depends

from ticketgate.api.dependencies import WorkflowDep, require_auth
from ticketgate.api.models import (
    APIResponse,
    ReviewerRequest,
    ReviewerResultResponse,
    TicketResponse,
    TransitionRequest,
    TransitionResponse,
    TransitionResultResponse,
    reviewer_result_to_response,
    ticket_to_response,
    transition_to_response,
)

router = APIRouter(prefix="/tickets", tags=["tickets"], dependencies=[Depends(require_auth)])


@router.post("/reviewers", response_model=APIResponse[list[ReviewerResultResponse]])
async def add_code_reviewer(
    request: ReviewerRequest, workflow: WorkflowDep
) -> APIResponse[list[ReviewerResultResponse]]:
    """Add a code reviewer to each of the given tickets."""
    results = await workflow.add_code_reviewer(request.keys, request.username)
    return APIResponse(data=[reviewer_result_to_response(r) for r in results])


@router.get("/{key}", response_model=APIResponse[TicketResponse])
async def get_ticket(key: str, workflow: WorkflowDep) -> APIResponse[TicketResponse]:
    """Get a ticket with the pull requests referenced in its comments."""
    ticket = await workflow.get_ticket(key)
    return APIResponse(data=ticket_to_response(ticket))


@router.get("/{key}/transitions", response_model=APIResponse[list[TransitionResponse]])
async def list_transitions(key: str, workflow: WorkflowDep) -> APIResponse[list[TransitionResponse]]:
    """List the transitions available from the ticket's current status."""
    transitions = await workflow.list_transitions(key)
    return APIResponse(data=[transition_to_response(t) for t in transitions])


@router.post("/{key}/transition", response_model=APIResponse[TransitionResultResponse])
async def transition_ticket(
    key: str, request: TransitionRequest, workflow: WorkflowDep
) -> APIResponse[TransitionResultResponse]:
    """Move a ticket to the status named by a free-text phrase."""
    transition = await workflow.transition_ticket(key, request.status)
    return APIResponse(
        data=TransitionResultResponse(
            key=key,
            transition=transition_to_response(transition),
            message=f"Ticket {key} moved to {transition.name}",
        )
    )
