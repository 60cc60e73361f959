"""Data models for the Ticket Workflow Orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class Comment:
    """A ticket comment. Only the body is used for PR extraction."""

    body: str
    id: str = ""
    author: str | None = None


@dataclass(frozen=True)
class PullRequestAlias:
    """Local review command derived from a pull-request URL.

    Attributes:
        repo: "<org>/<repo>" taken from the URL.
        pr_number: Pull-request number as text.
        alias_command: Shell invocation that checks the PR out locally.
    """

    repo: str
    pr_number: str
    alias_command: str


@dataclass(frozen=True)
class PullRequestReference:
    """A pull request mentioned in a ticket's comments."""

    url: str
    label: str
    alias_command: str | None = None

    @property
    def link(self) -> str:
        """Markdown link to the pull request."""
        return f"[{self.label}]({self.url})"


@dataclass
class Ticket:
    """A ticket as read from upstream, with its PR references."""

    key: str
    summary: str
    status: str
    assignee: str | None = None
    description: str | None = None
    pull_requests: list[PullRequestReference] = field(default_factory=list)


@dataclass
class TicketSummary:
    """A search hit with the PR references found in its comments."""

    key: str
    summary: str
    status: str
    assignee: str | None = None
    pull_requests: list[PullRequestReference] = field(default_factory=list)


@dataclass(frozen=True)
class Transition:
    """A workflow edge available from a ticket's current status.

    Attributes:
        to: Name of the status the edge leads to, when upstream reports it.
    """

    id: str
    name: str
    to: str | None = None


class ReviewerStatus(StrEnum):
    """Outcome of adding a code reviewer to one ticket."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class ReviewerResult:
    """Per-ticket result of add_code_reviewer."""

    key: str
    status: ReviewerStatus
    message: str
