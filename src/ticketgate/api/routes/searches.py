"""Ticket search endpoints."""

from fastapi import APIRouter, Depends, Query

from ticketgate.api.dependencies import WorkflowDep, require_auth
from ticketgate.api.models import (
    APIResponse,
    TicketSummaryResponse,
    ticket_summary_to_response,
)

router = APIRouter(tags=["search"], dependencies=[Depends(require_auth)])


@router.get("/teams/{team}/tickets", response_model=APIResponse[list[TicketSummaryResponse]])
async def list_tickets_by_team_and_status(
    team: str,
    workflow: WorkflowDep,
    status: str = Query(..., min_length=1, description="Status name or synonym"),
) -> APIResponse[list[TicketSummaryResponse]]:
    """List a team's tickets in the given status."""
    tickets = await workflow.search_by_team_and_status(team, status)
    return APIResponse(data=[ticket_summary_to_response(t) for t in tickets])


@router.get("/sprints/{sprint}/tickets", response_model=APIResponse[list[TicketSummaryResponse]])
async def list_tickets_by_sprint_and_team(
    sprint: str,
    workflow: WorkflowDep,
    team: str = Query(..., min_length=1, description="Team name"),
) -> APIResponse[list[TicketSummaryResponse]]:
    """List a team's tickets in the given sprint."""
    tickets = await workflow.search_by_sprint_and_team(sprint, team)
    return APIResponse(data=[ticket_summary_to_response(t) for t in tickets])
