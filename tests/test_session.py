"""Tests for the terminal session request cycle."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from matrix_terminal.cli.session import NO_REPLY_TEXT, WELCOME_MESSAGE, TerminalSession
from matrix_terminal.llm.types import Role


class StubRelay:
    base_url = "http://localhost:8000"

    def __init__(self, reply: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.reply = reply if reply is not None else {"reply": "Hi there"}
        self.error = error
        self.sent: list[str] = []
        self.gate: asyncio.Event | None = None
        self.on_send = None

    async def send(self, message: str) -> dict[str, Any]:
        self.sent.append(message)
        if self.on_send:
            self.on_send()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


def test_start_with_greeting():
    session = TerminalSession.start(StubRelay())
    assert len(session.messages) == 1
    assert session.messages[0].role == Role.ASSISTANT
    assert session.messages[0].content == WELCOME_MESSAGE
    assert session.is_loading is False


def test_start_without_greeting():
    session = TerminalSession.start(StubRelay(), greeting=None)
    assert session.messages == []


@pytest.mark.asyncio
async def test_submit_appends_user_then_reply():
    relay = StubRelay()
    session = TerminalSession.start(relay, greeting=None)
    observed = {}

    def capture() -> None:
        observed["messages"] = [(m.role, m.content) for m in session.messages]
        observed["loading"] = session.is_loading
        observed["buffer"] = session.input_buffer

    relay.on_send = capture
    await session.submit("Hello")

    # The user turn is logged before the relay answers
    assert observed == {"messages": [(Role.USER, "Hello")], "loading": True, "buffer": ""}
    assert relay.sent == ["Hello"]
    assert [(m.role, m.content) for m in session.messages] == [
        (Role.USER, "Hello"),
        (Role.ASSISTANT, "Hi there"),
    ]
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_submit_trims_input_buffer():
    relay = StubRelay()
    session = TerminalSession.start(relay, greeting=None)
    session.input_buffer = "   Hello  \n"
    await session.submit()
    assert relay.sent == ["Hello"]
    assert session.messages[0].content == "Hello"
    assert session.input_buffer == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
async def test_blank_input_ignored(text):
    relay = StubRelay()
    session = TerminalSession.start(relay)
    assert await session.submit(text) is None
    assert len(session.messages) == 1
    assert relay.sent == []


@pytest.mark.asyncio
async def test_submit_while_pending_is_noop():
    relay = StubRelay()
    relay.gate = asyncio.Event()
    session = TerminalSession.start(relay)

    first = asyncio.create_task(session.submit("first"))
    await asyncio.sleep(0)
    assert session.is_loading is True
    length = len(session.messages)

    assert await session.submit("second") is None
    assert session.input_buffer == ""
    assert len(session.messages) == length
    assert relay.sent == ["first"]

    relay.gate.set()
    await first
    assert session.input_buffer == ""
    assert session.is_loading is False
    assert session.messages[-1].content == "Hi there"


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [{}, {"reply": ""}, {"reply": None}])
async def test_missing_reply_uses_fallback(reply):
    session = TerminalSession.start(StubRelay(reply=reply), greeting=None)
    await session.submit("Hello")
    assert session.messages[-1].content == NO_REPLY_TEXT


@pytest.mark.asyncio
async def test_network_failure_appends_one_error():
    relay = StubRelay(error=httpx.ConnectError("Connection refused"))
    session = TerminalSession.start(relay, greeting=None)

    await session.submit("Hello")

    assert len(session.messages) == 2
    error = session.messages[-1]
    assert error.role == Role.ASSISTANT
    assert error.content == "Error: Connection refused"
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_failure_without_message_uses_connection_hint():
    session = TerminalSession.start(StubRelay(error=RuntimeError()), greeting=None)
    await session.submit("Hello")
    assert session.messages[-1].content == (
        "Error: Failed to connect to the server. "
        "Make sure the backend is running at http://localhost:8000."
    )


@pytest.mark.asyncio
async def test_accepts_input_after_failure():
    relay = StubRelay(error=RuntimeError("boom"))
    session = TerminalSession.start(relay, greeting=None)
    await session.submit("one")
    relay.error = None
    await session.submit("two")
    assert [m.content for m in session.messages] == ["one", "Error: boom", "two", "Hi there"]


@pytest.mark.asyncio
async def test_pending_submit_keeps_draft():
    relay = StubRelay()
    relay.gate = asyncio.Event()
    session = TerminalSession.start(relay, greeting=None)

    first = asyncio.create_task(session.submit("first"))
    await asyncio.sleep(0)
    session.input_buffer = "draft"

    assert await session.submit("second") is None
    assert session.input_buffer == "draft"

    relay.gate.set()
    await first
    assert session.input_buffer == "draft"
    assert relay.sent == ["first"]
