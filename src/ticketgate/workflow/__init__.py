"""Ticket workflow - Status normalization, PR references and transitions."""

from ticketgate.workflow.exceptions import InvalidTransitionError, WorkflowError
from ticketgate.workflow.models import (
    Comment,
    PullRequestAlias,
    PullRequestReference,
    ReviewerResult,
    ReviewerStatus,
    Ticket,
    TicketSummary,
    Transition,
)
from ticketgate.workflow.orchestrator import TicketWorkflow, quote_jql
from ticketgate.workflow.pull_requests import (
    NO_COMMAND,
    REPO_PATHS,
    PullRequestFormatter,
    extract_pull_request_links,
    format_pull_requests,
    generate_pr_alias,
    repo_path,
)
from ticketgate.workflow.status import STATUS_SYNONYMS, CanonicalStatus, normalize_status

__all__ = [
    "NO_COMMAND",
    "REPO_PATHS",
    "STATUS_SYNONYMS",
    "CanonicalStatus",
    "Comment",
    "InvalidTransitionError",
    "PullRequestAlias",
    "PullRequestFormatter",
    "PullRequestReference",
    "ReviewerResult",
    "ReviewerStatus",
    "Ticket",
    "TicketSummary",
    "TicketWorkflow",
    "Transition",
    "WorkflowError",
    "extract_pull_request_links",
    "format_pull_requests",
    "generate_pr_alias",
    "normalize_status",
    "quote_jql",
    "repo_path",
]
