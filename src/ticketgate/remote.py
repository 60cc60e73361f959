"""Shared plumbing for the upstream REST clients."""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ticketgate.exceptions import RemoteFetchError
from ticketgate.logging import get_logger, sanitize_for_log, truncate_output

M = TypeVar("M", bound=BaseModel)


def error_message(response: httpx.Response) -> str:
    """Best human-readable error from an Atlassian error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        messages = body.get("errorMessages") or []
        if messages:
            return str(messages[0])
        errors = body.get("errors") or {}
        if isinstance(errors, dict) and errors:
            return "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        if body.get("message"):
            return str(body["message"])
    return response.text


class RestClient:
    """Lazily created httpx.AsyncClient with uniform error handling.

    Subclasses provide the base URL and default headers.
    """

    logger = get_logger("remote")

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str],
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = headers
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (None when empty).

        Raises:
            RemoteFetchError: On transport error, non-2xx status or non-JSON body.
        """
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error("%s %s failed: %s", method, path, sanitize_for_log(str(e)))
            raise RemoteFetchError(operation, None, str(e)) from e

        if not response.is_success:
            self.logger.error(
                "%s %s returned %d: %s",
                method,
                path,
                response.status_code,
                truncate_output(sanitize_for_log(response.text)),
            )
            raise RemoteFetchError(operation, response.status_code, error_message(response))

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(operation, response.status_code, "Response is not JSON") from e

    def _parse(self, model: type[M], data: Any, operation: str) -> M:
        """Validate a response body against its contract.

        Raises:
            RemoteFetchError: If the body does not conform.
        """
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self.logger.error("%s returned an unexpected shape: %s", operation, e)
            raise RemoteFetchError(operation, None, f"Unexpected response shape: {e}") from e
