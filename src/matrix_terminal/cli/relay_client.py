"""HTTP client the terminal uses to reach the chat relay."""

from __future__ import annotations

from typing import Any

import httpx

from matrix_terminal.api.schemas import ChatRequest
from matrix_terminal.core.http import make_httpx_client


class RelayClientError(Exception):
    """The relay could not be reached or answered with an error."""


class RelayClient:
    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or make_httpx_client()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def chat_url(self) -> str:
        return f"{self._base_url}/api/chat"

    async def send(self, message: str) -> dict[str, Any]:
        """POST one message and return the decoded JSON body.

        Raises RelayClientError on a non-2xx status or an undecodable body;
        transport errors propagate as ``httpx.HTTPError``.
        """
        response = await self._client.post(
            self.chat_url,
            json=ChatRequest(message=message).model_dump(),
        )
        if not response.is_success:
            raise RelayClientError(_describe_status(response))
        return _decode(response)

    async def health(self) -> dict[str, Any]:
        response = await self._client.get(self.chat_url)
        if not response.is_success:
            raise RelayClientError(_describe_status(response))
        return _decode(response)

    async def close(self) -> None:
        await self._client.aclose()


def _describe_status(response: httpx.Response) -> str:
    text = f"HTTP error! status: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return text
    if isinstance(body, dict) and body.get("error"):
        text += f" ({body['error']})"
    return text


def _decode(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as e:
        raise RelayClientError("Invalid JSON in relay response") from e
    if not isinstance(data, dict):
        raise RelayClientError("Invalid JSON in relay response")
    return data
