"""TicketWorkflow - Stateless facade over the upstream ticket store."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ticketgate.config import DEFAULT_REVIEWER_FIELD
from ticketgate.exceptions import RemoteFetchError
from ticketgate.jira import DEFAULT_MAX_RESULTS
from ticketgate.logging import get_logger
from ticketgate.workflow.exceptions import InvalidTransitionError
from ticketgate.workflow.models import (
    Comment,
    ReviewerResult,
    ReviewerStatus,
    Ticket,
    TicketSummary,
    Transition,
)
from ticketgate.workflow.pull_requests import PullRequestFormatter
from ticketgate.workflow.status import normalize_status

if TYPE_CHECKING:
    from ticketgate.config import Settings
    from ticketgate.jira import IssueResponse, JiraClient, JiraComment

logger = get_logger("workflow")


def quote_jql(value: str) -> str:
    """Quote a value for use as a JQL string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _to_comments(comments: list[JiraComment]) -> list[Comment]:
    return [
        Comment(
            body=c.body,
            id=c.id,
            author=c.author.display_name if c.author else None,
        )
        for c in comments
    ]


def _assignee(issue: IssueResponse) -> str | None:
    assignee = issue.fields.assignee
    if assignee is None:
        return None
    return assignee.display_name or assignee.name


class TicketWorkflow:
    """Reads tickets, resolves transitions and applies them upstream.

    Nothing is cached between calls: every operation asks the upstream store,
    which stays the only source of truth. Fan-out reads run concurrently.
    """

    def __init__(
        self,
        jira: JiraClient,
        pr_formatter: PullRequestFormatter | None = None,
        reviewer_field: str = DEFAULT_REVIEWER_FIELD,
        page_size: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        """Initialize the workflow.

        Args:
            jira: Client for the upstream ticket store.
            pr_formatter: Rules for turning PR URLs into references.
            reviewer_field: Issue field holding the code reviewer list.
            page_size: Maximum number of tickets returned by searches.
        """
        self.jira = jira
        self.pr_formatter = pr_formatter or PullRequestFormatter()
        self.reviewer_field = reviewer_field
        self.page_size = page_size

    @classmethod
    def from_settings(cls, jira: JiraClient, settings: Settings) -> TicketWorkflow:
        return cls(
            jira=jira,
            pr_formatter=PullRequestFormatter(
                review_command=settings.review_command,
                git_host=settings.git_host,
                org_prefix=settings.repo_org_prefix,
            ),
            reviewer_field=settings.reviewer_field,
            page_size=settings.search_page_size,
        )

    async def get_ticket(self, key: str) -> Ticket:
        """Fetch a ticket and the PR references found in its comments.

        Fields and comments are fetched concurrently. Both must succeed.

        Raises:
            RemoteFetchError: If either upstream call fails.
        """
        issue, comments = await asyncio.gather(
            self.jira.get_issue(key),
            self.jira.get_comments(key),
        )
        return Ticket(
            key=issue.key or key,
            summary=issue.fields.summary,
            status=issue.fields.status.name,
            assignee=_assignee(issue),
            description=issue.fields.description,
            pull_requests=self.pr_formatter.references_from_comments(_to_comments(comments)),
        )

    async def list_transitions(self, key: str) -> list[Transition]:
        """Transitions legal from the ticket's current status, fetched fresh."""
        transitions = await self.jira.get_transitions(key)
        return [
            Transition(id=t.id, name=t.name, to=t.to.name if t.to else None) for t in transitions
        ]

    async def transition_ticket(self, key: str, status_phrase: str) -> Transition:
        """Move a ticket to the status named by a free-text phrase.

        Args:
            key: Ticket key.
            status_phrase: Target status or one of its synonyms.

        Returns:
            The transition that was applied.

        Raises:
            InvalidTransitionError: If no available transition matches.
            RemoteFetchError: If upstream rejects a call. Not retried.
        """
        target = str(normalize_status(status_phrase))
        transitions = await self.list_transitions(key)

        wanted = target.lower()
        # Transition names win; the target status name is the fallback
        match = next((t for t in transitions if t.name.lower() == wanted), None) or next(
            (t for t in transitions if t.to and t.to.lower() == wanted), None
        )
        if match is None:
            available = [t.name for t in transitions]
            logger.info("No transition to %r for %s (available: %s)", target, key, available)
            raise InvalidTransitionError(key, target, available)

        await self.jira.execute_transition(key, match.id)
        logger.info("Transitioned %s via %s (%s)", key, match.id, match.name)
        return match

    async def search_by_team_and_status(self, team: str, status_phrase: str) -> list[TicketSummary]:
        """Tickets of a team currently in the given status."""
        status = str(normalize_status(status_phrase))
        jql = f"Team = {quote_jql(team)} AND status = {quote_jql(status)} ORDER BY updated DESC"
        return await self._search_with_pull_requests(jql)

    async def search_by_sprint_and_team(self, sprint: str, team: str) -> list[TicketSummary]:
        """Tickets of a team in the given sprint."""
        jql = f"sprint = {quote_jql(sprint)} AND Team = {quote_jql(team)} ORDER BY updated DESC"
        return await self._search_with_pull_requests(jql)

    async def _search_with_pull_requests(self, jql: str) -> list[TicketSummary]:
        issues = await self.jira.search(jql, max_results=self.page_size)

        # One independent slot per ticket; a failed slot never affects siblings
        results: list[Any] = await asyncio.gather(
            *(self.jira.get_comments(issue.key) for issue in issues),
            return_exceptions=True,
        )

        summaries = []
        for issue, result in zip(issues, results, strict=True):
            if isinstance(result, Exception):
                logger.warning("Could not fetch comments for %s: %s", issue.key, result)
                pull_requests = []
            elif isinstance(result, BaseException):
                raise result
            else:
                pull_requests = self.pr_formatter.references_from_comments(_to_comments(result))
            summaries.append(
                TicketSummary(
                    key=issue.key,
                    summary=issue.fields.summary,
                    status=issue.fields.status.name,
                    assignee=_assignee(issue),
                    pull_requests=pull_requests,
                )
            )
        return summaries

    async def add_code_reviewer(self, keys: list[str], username: str) -> list[ReviewerResult]:
        """Add a user to the code reviewer field of each ticket.

        Each ticket is handled independently; one failure does not stop others.
        """
        results: list[Any] = await asyncio.gather(
            *(self._add_reviewer(key, username) for key in keys),
            return_exceptions=True,
        )

        outcomes = []
        for key, result in zip(keys, results, strict=True):
            if isinstance(result, Exception):
                logger.error(
                    "Unexpected failure adding reviewer %s to %s: %r", username, key, result
                )
                outcomes.append(ReviewerResult(key, ReviewerStatus.ERROR, "Unexpected error"))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)
        return outcomes

    async def _add_reviewer(self, key: str, username: str) -> ReviewerResult:
        try:
            issue = await self.jira.get_issue(key)
            current = issue.fields.custom_field(self.reviewer_field)
            if current is None:
                current = []
            elif not isinstance(current, list):
                logger.warning(
                    "Reviewer field %s on %s is not a list: %r", self.reviewer_field, key, current
                )
                return ReviewerResult(key, ReviewerStatus.ERROR, "Reviewer field is not a list")
            if any(isinstance(r, dict) and r.get("name") == username for r in current):
                return ReviewerResult(key, ReviewerStatus.SKIPPED, "Already a reviewer")

            await self.jira.update_fields(
                key, {self.reviewer_field: [*current, {"name": username}]}
            )
        except RemoteFetchError as e:
            logger.warning("Could not add reviewer %s to %s: %s", username, key, e)
            return ReviewerResult(key, ReviewerStatus.ERROR, e.detail or str(e))

        logger.info("Added reviewer %s to %s", username, key)
        return ReviewerResult(key, ReviewerStatus.SUCCESS, "Added as reviewer")
