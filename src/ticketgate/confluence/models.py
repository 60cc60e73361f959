"""Data models for the Confluence client.

The pydantic models are the response contracts of the REST API; the
dataclasses are what the client hands back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConfluenceUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class VersionInfo(BaseModel):
    number: int
    when: str | None = None
    by: ConfluenceUser | None = None
    minor_edit: bool = Field(default=False, alias="minorEdit")


class SpaceInfo(BaseModel):
    key: str
    name: str = ""


class StorageBody(BaseModel):
    value: str = ""
    representation: str = "storage"


class ContentBody(BaseModel):
    storage: StorageBody


class LabelList(BaseModel):
    results: list[dict[str, Any]] = Field(default_factory=list)


class ContentMetadata(BaseModel):
    labels: LabelList | None = None


class ContentResponse(BaseModel):
    """Response of content read and content update."""

    id: str
    title: str
    version: VersionInfo
    space: SpaceInfo
    body: ContentBody | None = None
    metadata: ContentMetadata | None = None


class SpaceListResponse(BaseModel):
    results: list[dict[str, Any]] = Field(default_factory=list)


def user_display_name(user: ConfluenceUser | None) -> str | None:
    if user is None:
        return None
    return user.display_name or user.username


@dataclass
class Page:
    """A Confluence page with its body in both storage HTML and Markdown."""

    id: str
    title: str
    version: int
    space_key: str
    space_name: str
    html_content: str
    markdown_content: str
    labels: list[str] = field(default_factory=list)
    last_updated: str | None = None
    updated_by: str | None = None


@dataclass
class PageUpdateResult:
    """Metadata of a page after an update."""

    id: str
    title: str
    version: int
    space_key: str
    space_name: str
    last_updated: str | None = None
    updated_by: str | None = None

    @classmethod
    def from_response(cls, content: ContentResponse) -> PageUpdateResult:
        return cls(
            id=content.id,
            title=content.title,
            version=content.version.number,
            space_key=content.space.key,
            space_name=content.space.name,
            last_updated=content.version.when,
            updated_by=user_display_name(content.version.by),
        )


@dataclass
class ConnectionStatus:
    """Outcome of a connectivity check. Never raised, always returned."""

    success: bool
    message: str
    url: str
    username: str
    status_code: int | None = None
    spaces: int = 0
