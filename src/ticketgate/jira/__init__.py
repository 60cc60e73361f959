"""Jira client - Typed async access to the Jira REST API."""

from ticketgate.exceptions import RemoteFetchError
from ticketgate.jira.client import DEFAULT_MAX_RESULTS, DEFAULT_SEARCH_FIELDS, JiraClient
from ticketgate.jira.models import (
    IssueFields,
    IssueResponse,
    JiraComment,
    JiraStatus,
    JiraTransition,
    JiraUser,
)

__all__ = [
    "DEFAULT_MAX_RESULTS",
    "DEFAULT_SEARCH_FIELDS",
    "IssueFields",
    "IssueResponse",
    "JiraClient",
    "JiraComment",
    "JiraStatus",
    "JiraTransition",
    "JiraUser",
    "RemoteFetchError",
]
