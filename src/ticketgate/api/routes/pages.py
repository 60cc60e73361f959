"""Confluence page endpoints."""

from fastapi import APIRouter, Depends

from ticketgate.api.dependencies import ConfluenceDep, require_auth
from ticketgate.api.models import (
    APIResponse,
    ConnectionStatusResponse,
    PageResponse,
    PageUpdateRequest,
    PageUpdateResponse,
    connection_status_to_response,
    page_to_response,
    page_update_to_response,
)

router = APIRouter(prefix="/pages", tags=["pages"], dependencies=[Depends(require_auth)])


@router.get("/connection", response_model=APIResponse[ConnectionStatusResponse])
async def test_connection(confluence: ConfluenceDep) -> APIResponse[ConnectionStatusResponse]:
    """Check connectivity to Confluence."""
    status = await confluence.test_connection()
    return APIResponse(data=connection_status_to_response(status))


@router.get("/{page_id}", response_model=APIResponse[PageResponse])
async def get_page(page_id: str, confluence: ConfluenceDep) -> APIResponse[PageResponse]:
    """Get a page with its body rendered as Markdown."""
    page = await confluence.get_page(page_id)
    return APIResponse(data=page_to_response(page))


@router.put("/{page_id}", response_model=APIResponse[PageUpdateResponse])
async def update_page(
    page_id: str, request: PageUpdateRequest, confluence: ConfluenceDep
) -> APIResponse[PageUpdateResponse]:
    """Replace a page's body with new storage-format HTML."""
    result = await confluence.update_page(page_id, request.content, minor_edit=request.minor_edit)
    return APIResponse(data=page_update_to_response(result))
