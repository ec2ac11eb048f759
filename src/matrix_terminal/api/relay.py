"""Chat relay: validate one user message, forward it, normalise the reply."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from matrix_terminal.api.errors import (
    ConfigurationError,
    EmptyReplyError,
    ProviderAuthError,
    ProviderError,
    ValidationError,
)
from matrix_terminal.core.config import Settings
from matrix_terminal.core.logging import sanitize
from matrix_terminal.llm.openai_client import OpenAIError
from matrix_terminal.llm.types import ChatMessage, Role

logger = logging.getLogger(__name__)

CREDENTIAL_NAME = "OPENAI_API_KEY"


class CompletionClient(Protocol):
    async def create_chat_completion(self, messages: list[ChatMessage]) -> dict[str, Any]: ...


def decode_body(raw: bytes) -> Any:
    """Decode a raw request body as JSON.

    Raises ValidationError when it is not valid JSON, including bodies
    nested too deeply to decode.
    """
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.warning("Rejected relay request: body is not valid JSON (%s)", type(e).__name__)
        raise ValidationError() from e


def parse_message(body: Any) -> str:
    """Return the ``message`` field of a decoded request body.

    Raises ValidationError unless it is a non-empty string.
    """
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str) or not message:
        logger.warning("Rejected relay request: invalid message field (%s)", type(message).__name__)
        raise ValidationError()
    return message


def extract_reply(response: dict[str, Any]) -> str | None:
    """Text content of the first completion choice, if any."""
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) and content else None


class ChatRelay:
    """Stateless relay between the terminal and the LLM provider."""

    def __init__(self, settings: Settings, llm: CompletionClient) -> None:
        self._settings = settings
        self._llm = llm

    def ensure_configured(self) -> None:
        if not self._settings.openai_api_key:
            logger.error("%s is not set in environment variables", CREDENTIAL_NAME)
            raise ConfigurationError(CREDENTIAL_NAME)

    def build_prompt(self, message: str) -> list[ChatMessage]:
        return [
            ChatMessage(role=Role.SYSTEM, content=self._settings.system_prompt),
            ChatMessage(role=Role.USER, content=message),
        ]

    async def reply(self, message: str) -> str:
        """Forward ``message`` to the provider exactly once and return its reply."""
        try:
            response = await self._llm.create_chat_completion(self.build_prompt(message))
        except Exception as exc:
            raise self._classify(exc) from exc

        reply = extract_reply(response)
        if reply is None:
            logger.error("OpenAI response missing content: %s", sanitize(response))
            raise EmptyReplyError()
        return reply

    @staticmethod
    def _classify(exc: Exception) -> ProviderError | ProviderAuthError:
        # "API key" matching is a heuristic on provider wording; the typed
        # 401 / invalid_api_key signal covers rewordings.
        text = str(exc)
        logger.error(
            "Error calling OpenAI API: %s (%s)",
            sanitize(text),
            type(exc).__name__,
            exc_info=exc,
        )
        is_auth = "API key" in text or (isinstance(exc, OpenAIError) and exc.is_auth_error)
        if is_auth:
            return ProviderAuthError(text)
        return ProviderError(text or "Unknown error")
