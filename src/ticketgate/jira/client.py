"""JiraClient - Async client for the Jira REST API."""

from __future__ import annotations

import base64
from typing import Any

import httpx

from ticketgate.jira.models import (
    CommentsResponse,
    IssueResponse,
    JiraComment,
    JiraTransition,
    SearchResponse,
    TransitionsResponse,
)
from ticketgate.logging import get_logger
from ticketgate.remote import RestClient

logger = get_logger("jira")

DEFAULT_SEARCH_FIELDS = ("key", "summary", "status", "assignee")
DEFAULT_MAX_RESULTS = 25


class JiraClient(RestClient):
    """Client for the subset of the Jira REST API the workflow needs.

    Every method raises RemoteFetchError on transport failure, non-2xx status
    or a response body that does not match its contract.
    """

    logger = logger

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Jira client.

        Args:
            base_url: REST base URL, e.g. https://jira.example.com/rest/api/2
            email: Account email for basic auth
            api_token: API token for basic auth
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (for testing)
        """
        credentials = base64.b64encode(f"{email}:{api_token}".encode()).decode("ascii")
        super().__init__(
            base_url,
            headers={
                "Authorization": f"Basic {credentials}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self.email = email

    async def get_issue(self, key: str) -> IssueResponse:
        """Read an issue with its fields."""
        logger.debug("Fetching issue %s", key)
        data = await self._request(
            "issue-read",
            "GET",
            f"/issue/{key}",
            params={"expand": "names,renderedFields"},
        )
        return self._parse(IssueResponse, data, "issue-read")

    async def get_comments(self, key: str) -> list[JiraComment]:
        """Read all comments of an issue, oldest first."""
        logger.debug("Fetching comments for %s", key)
        data = await self._request("issue-comments-read", "GET", f"/issue/{key}/comment")
        return self._parse(CommentsResponse, data or {}, "issue-comments-read").comments

    async def get_transitions(self, key: str) -> list[JiraTransition]:
        """Read the transitions available from the issue's current status."""
        data = await self._request("issue-transitions-read", "GET", f"/issue/{key}/transitions")
        return self._parse(TransitionsResponse, data or {}, "issue-transitions-read").transitions

    async def execute_transition(self, key: str, transition_id: str) -> None:
        """Apply a transition to an issue."""
        logger.info("Applying transition %s to %s", transition_id, key)
        await self._request(
            "issue-transition-execute",
            "POST",
            f"/issue/{key}/transitions",
            json={"transition": {"id": transition_id}},
        )

    async def search(
        self,
        jql: str,
        fields: tuple[str, ...] | list[str] = DEFAULT_SEARCH_FIELDS,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> list[IssueResponse]:
        """Search issues with a JQL query.

        Args:
            jql: JQL query string
            fields: Fields to return for each issue
            max_results: Page size

        Returns:
            Matching issues, at most ``max_results``.
        """
        logger.debug("Searching issues: %s", jql)
        data = await self._request(
            "issue-search-by-query",
            "GET",
            "/search",
            params={"jql": jql, "maxResults": max_results, "fields": ",".join(fields)},
        )
        result = self._parse(SearchResponse, data or {}, "issue-search-by-query")
        logger.info("Search returned %d of %d issue(s)", len(result.issues), result.total)
        return result.issues

    async def update_fields(self, key: str, fields: dict[str, Any]) -> None:
        """Update fields of an issue."""
        logger.info("Updating fields %s on %s", sorted(fields), key)
        await self._request("issue-field-update", "PUT", f"/issue/{key}", json={"fields": fields})
