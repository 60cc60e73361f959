"""Typed response contracts for the Jira REST API.

Only the fields the workflow reads are declared. Shapes that do not conform
are rejected at the client boundary.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JiraUser(BaseModel):
    """A person reference."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class JiraStatus(BaseModel):
    """Workflow status of an issue."""

    name: str


class IssueFields(BaseModel):
    """Issue fields. Custom fields are kept as extras."""

    model_config = ConfigDict(extra="allow")

    summary: str = ""
    status: JiraStatus
    assignee: JiraUser | None = None
    description: str | None = None

    def custom_field(self, field_id: str) -> Any:
        """Raw value of a custom field, or None when absent."""
        return (self.model_extra or {}).get(field_id)


class IssueResponse(BaseModel):
    """Response of issue-read; also the shape of each search hit."""

    key: str
    fields: IssueFields


class JiraComment(BaseModel):
    """A single issue comment."""

    id: str = ""
    body: str = ""
    author: JiraUser | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("body", mode="before")
    @classmethod
    def _body_default(cls, value: Any) -> Any:
        return "" if value is None else value


class CommentsResponse(BaseModel):
    """Response of issue-comments-read."""

    comments: list[JiraComment] = Field(default_factory=list)


class JiraTransition(BaseModel):
    """An edge of the upstream workflow available from the current status."""

    id: str
    name: str
    to: JiraStatus | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class TransitionsResponse(BaseModel):
    """Response of issue-transitions-read."""

    transitions: list[JiraTransition] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Response of issue-search-by-query."""

    issues: list[IssueResponse] = Field(default_factory=list)
    total: int = 0
