"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from matrix_terminal.core.config import Settings
from matrix_terminal.llm.types import ChatMessage


def _completion(content: Any) -> dict[str, Any]:
    """An OpenAI chat completion body with a single choice."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class StubLLM:
    """Completion client double that records every call."""

    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response if response is not None else _completion("T")
        self.error = error
        self.calls: list[list[ChatMessage]] = []

    async def create_chat_completion(self, messages: list[ChatMessage]) -> dict[str, Any]:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def settings() -> Settings:
    """Settings with a configured credential, isolated from any .env file."""
    return Settings(openai_api_key="sk-test-key", log_level="DEBUG", _env_file=None)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(openai_api_key="", _env_file=None)


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def make_completion():
    """Builder for OpenAI completion bodies."""
    return _completion


@pytest.fixture
def make_llm():
    """Factory for recording completion-client doubles."""

    def _make(response: dict[str, Any] | None = None, error: Exception | None = None) -> StubLLM:
        return StubLLM(response=response, error=error)

    return _make
