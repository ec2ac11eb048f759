"""OpenAI chat completions client.

Issues a single non-streaming completion request per call. Provider
failures are raised as ``OpenAIError`` with the provider's own message
text, so callers can report it verbatim.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from matrix_terminal.core.http import make_httpx_client
from matrix_terminal.core.logging import sanitize
from matrix_terminal.llm.types import ChatMessage, LLMConfig

logger = logging.getLogger(__name__)


class OpenAIError(Exception):
    """Raised when the OpenAI API call fails or returns an unusable body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401 or self.code == "invalid_api_key"


class OpenAIClient:
    """Non-streaming OpenAI client."""

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client or make_httpx_client(timeout=config.timeout)

    def _get_chat_url(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/chat/completions"

    def _get_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.api_key}"}

    async def create_chat_completion(self, messages: list[ChatMessage]) -> dict[str, Any]:
        """Send one completion request and return the decoded response body."""
        request_body: dict[str, Any] = {
            "model": self._config.model,
            "messages": [m.to_api() for m in messages],
        }
        logger.debug("OpenAI request: model=%s messages=%d", self._config.model, len(messages))

        try:
            response = await self._client.post(
                self._get_chat_url(),
                json=request_body,
                headers=self._get_headers(),
            )
        except httpx.HTTPError as e:
            raise OpenAIError(f"OpenAI connection error: {e}") from e

        if response.status_code != 200:
            raise self._error_from_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise OpenAIError(
                f"Malformed response from OpenAI: {sanitize(response.text)}",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise OpenAIError("Malformed response from OpenAI: expected a JSON object")
        return data

    @staticmethod
    def _error_from_response(response: httpx.Response) -> OpenAIError:
        """Build an OpenAIError from an error body like ``{"error": {"message", "code"}}``."""
        message = ""
        code = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message") or ""
            code = body["error"].get("code")
        if not message:
            message = f"OpenAI API error: {response.status_code} - {sanitize(response.text)}"
        return OpenAIError(message, status_code=response.status_code, code=code)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
