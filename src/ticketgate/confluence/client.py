"""ConfluenceClient - Reads and updates Confluence pages."""

from __future__ import annotations


import httpx

from ticketgate.confluence.markdown import html_to_markdown
from ticketgate.confluence.models import (
    ConnectionStatus,
    ContentResponse,
    Page,
    PageUpdateResult,
    SpaceListResponse,
    user_display_name,
)
from ticketgate.exceptions import RemoteFetchError
from ticketgate.logging import get_logger
from ticketgate.remote import RestClient

logger = get_logger("confluence")

PAGE_EXPAND = "body.storage,version,space,metadata.labels"


class ConfluenceClient(RestClient):
    """Client for Confluence pages, authenticated with a personal access token.

    Page updates use Confluence's optimistic concurrency: the caller sends the
    next version number, and a concurrent edit makes upstream answer 409.
    """

    logger = logger

    def __init__(
        self,
        host: str,
        api_token: str,
        username: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Confluence client.

        Args:
            host: Confluence base URL, e.g. https://wiki.example.com
            api_token: Personal access token
            username: Account name, reported by test_connection only
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (for testing)
        """
        self.host = host.rstrip("/")
        self.username = username
        super().__init__(
            f"{self.host}/rest/api",
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def test_connection(self) -> ConnectionStatus:
        """Check that the server is reachable and the token is accepted."""
        try:
            data = await self._request("space-list", "GET", "/space", params={"limit": 1})
            spaces = self._parse(SpaceListResponse, data or {}, "space-list")
        except RemoteFetchError as e:
            logger.warning("Confluence connection test failed: %s", e)
            return ConnectionStatus(
                success=False,
                message=f"Connection test failed: {e.detail or e}",
                url=self.host,
                username=self.username,
                status_code=e.status_code,
            )
        return ConnectionStatus(
            success=True,
            message="Successfully connected to Confluence",
            url=self.host,
            username=self.username,
            spaces=len(spaces.results),
        )

    async def get_page(self, page_id: str) -> Page:
        """Fetch a page with its storage body rendered as Markdown.

        Raises:
            RemoteFetchError: If the page cannot be read.
        """
        logger.debug("Fetching page %s", page_id)
        data = await self._request(
            "page-read", "GET", f"/content/{page_id}", params={"expand": PAGE_EXPAND}
        )
        content = self._parse(ContentResponse, data, "page-read")
        if content.body is None:
            raise RemoteFetchError("page-read", None, "Page has no storage body")

        html = content.body.storage.value
        labels = []
        if content.metadata and content.metadata.labels:
            labels = [str(label.get("name", "")) for label in content.metadata.labels.results]

        return Page(
            id=content.id,
            title=content.title,
            version=content.version.number,
            space_key=content.space.key,
            space_name=content.space.name,
            html_content=html,
            markdown_content=html_to_markdown(html),
            labels=labels,
            last_updated=content.version.when,
            updated_by=user_display_name(content.version.by),
        )

    async def update_page(
        self, page_id: str, content: str, minor_edit: bool = False
    ) -> PageUpdateResult:
        """Replace a page's body, bumping its version by one.

        Args:
            page_id: Confluence page id
            content: New body in storage-format HTML
            minor_edit: Whether watchers should be spared a notification

        Returns:
            Metadata of the updated page.

        Raises:
            RemoteFetchError: If the read or the update fails. A concurrent
                edit surfaces with status 409 and is not retried.
        """
        current = await self.get_page(page_id)
        next_version = current.version + 1
        logger.info("Updating page %s to version %d", page_id, next_version)

        payload = {
            "id": page_id,
            "type": "page",
            "title": current.title,
            "space": {"key": current.space_key},
            "version": {"number": next_version, "minorEdit": minor_edit},
            "body": {"storage": {"value": content, "representation": "storage"}},
        }
        data = await self._request("page-update", "PUT", f"/content/{page_id}", json=payload)
        return PageUpdateResult.from_response(self._parse(ContentResponse, data, "page-update"))
