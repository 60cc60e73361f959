"""Unit tests for ConfluenceClient against a mocked transport."""

import json
from collections.abc import Callable

import httpx
import pytest

from ticketgate.confluence import ConfluenceClient
from ticketgate.exceptions import RemoteFetchError

HOST = "https://wiki.example.com"


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> ConfluenceClient:
    return ConfluenceClient(
        host=HOST,
        api_token="wiki-token",
        username="bot",
        transport=httpx.MockTransport(handler),
    )


def content(version: int = 4, body: str | None = "<p>Hello <strong>world</strong></p>") -> dict:
    data = {
        "id": "123",
        "title": "Runbook",
        "version": {
            "number": version,
            "when": "2024-05-01T10:00:00.000Z",
            "by": {"username": "jdoe", "displayName": "Jane Doe"},
        },
        "space": {"key": "OPS", "name": "Operations"},
        "metadata": {"labels": {"results": [{"name": "runbook"}, {"name": "oncall"}]}},
    }
    if body is not None:
        data["body"] = {"storage": {"value": body, "representation": "storage"}}
    return data


@pytest.mark.unit
class TestGetPage:
    """Tests for get_page."""

    @pytest.mark.asyncio
    async def test_reads_page(self) -> None:
        """Pages come back with metadata and both renderings of the body."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=content())

        client = make_client(handler)
        page = await client.get_page("123")
        await client.close()

        assert page.title == "Runbook"
        assert page.version == 4
        assert page.space_key == "OPS"
        assert page.space_name == "Operations"
        assert page.labels == ["runbook", "oncall"]
        assert page.updated_by == "Jane Doe"
        assert page.html_content == "<p>Hello <strong>world</strong></p>"
        assert page.markdown_content == "Hello **world**"
        assert seen[0].url.path == "/rest/api/content/123"
        assert seen[0].url.params["expand"] == "body.storage,version,space,metadata.labels"
        assert seen[0].headers["Authorization"] == "Bearer wiki-token"

    @pytest.mark.asyncio
    async def test_missing_body(self) -> None:
        """A page without a storage body cannot be rendered."""
        client = make_client(lambda request: httpx.Response(200, json=content(body=None)))

        with pytest.raises(RemoteFetchError, match="no storage body"):
            await client.get_page("123")

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        """Upstream errors surface as RemoteFetchError."""
        client = make_client(
            lambda request: httpx.Response(404, json={"message": "No content found"})
        )

        with pytest.raises(RemoteFetchError) as exc_info:
            await client.get_page("999")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "No content found"


@pytest.mark.unit
class TestUpdatePage:
    """Tests for update_page."""

    @pytest.mark.asyncio
    async def test_bumps_version(self) -> None:
        """The update sends the next version number and the new body."""
        puts: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=content(version=4))
            puts.append(json.loads(request.content))
            return httpx.Response(200, json=content(version=5, body="<p>New</p>"))

        client = make_client(handler)
        result = await client.update_page("123", "<p>New</p>", minor_edit=True)

        assert puts == [
            {
                "id": "123",
                "type": "page",
                "title": "Runbook",
                "space": {"key": "OPS"},
                "version": {"number": 5, "minorEdit": True},
                "body": {"storage": {"value": "<p>New</p>", "representation": "storage"}},
            }
        ]
        assert result.version == 5
        assert result.title == "Runbook"
        assert result.updated_by == "Jane Doe"

    @pytest.mark.asyncio
    async def test_concurrent_edit_is_not_retried(self) -> None:
        """A 409 from upstream is reported after a single attempt."""
        puts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=content(version=4))
            puts.append(request)
            return httpx.Response(409, json={"message": "Version must be incremented"})

        client = make_client(handler)
        with pytest.raises(RemoteFetchError) as exc_info:
            await client.update_page("123", "<p>New</p>")

        assert exc_info.value.status_code == 409
        assert len(puts) == 1


@pytest.mark.unit
class TestConnection:
    """Tests for test_connection."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        """A readable space list means the connection works."""
        client = make_client(
            lambda request: httpx.Response(200, json={"results": [{"key": "OPS"}]})
        )

        status = await client.test_connection()

        assert status.success is True
        assert status.message == "Successfully connected to Confluence"
        assert status.url == HOST
        assert status.username == "bot"
        assert status.spaces == 1

    @pytest.mark.asyncio
    async def test_failure_is_returned_not_raised(self) -> None:
        """Authentication failures are reported in the result."""
        client = make_client(lambda request: httpx.Response(401, text="Unauthorized"))

        status = await client.test_connection()

        assert status.success is False
        assert status.status_code == 401
        assert status.message == "Connection test failed: Unauthorized"
