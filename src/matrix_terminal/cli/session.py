"""In-memory terminal session: the message log and one request cycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from matrix_terminal.llm.types import ChatMessage, Role

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Welcome to the Matrix Terminal. Type your message and press ENTER "
    "to chat with your AI mental coach."
)
NO_REPLY_TEXT = "No response received."


class Relay(Protocol):
    base_url: str

    async def send(self, message: str) -> dict[str, Any]: ...


def connection_hint(base_url: str) -> str:
    return f"Failed to connect to the server. Make sure the backend is running at {base_url}."


@dataclass
class TerminalSession:
    """One client lifetime.

    ``messages`` is append-only. ``is_loading`` allows at most one relay
    request in flight; it is a plain flag, which is enough on a single
    event loop.
    """

    relay: Relay
    messages: list[ChatMessage] = field(default_factory=list)
    input_buffer: str = ""
    is_loading: bool = False

    @classmethod
    def start(cls, relay: Relay, greeting: str | None = WELCOME_MESSAGE) -> TerminalSession:
        session = cls(relay=relay)
        if greeting:
            session.add_message(Role.ASSISTANT, greeting)
        return session

    def add_message(self, role: Role, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message

    async def submit(self, text: str | None = None) -> ChatMessage | None:
        """Send ``text`` (or the input buffer) and append the outcome.

        Returns the appended assistant message, or None when the input is
        blank or a request is already pending.
        """
        if self.is_loading:
            return None
        if text is not None:
            self.input_buffer = text
        content = self.input_buffer.strip()
        if not content:
            return None

        self.add_message(Role.USER, content)
        self.input_buffer = ""
        self.is_loading = True

        try:
            data = await self.relay.send(content)
            reply = data.get("reply")
            return self.add_message(Role.ASSISTANT, reply if isinstance(reply, str) and reply else NO_REPLY_TEXT)
        except Exception as e:
            logger.warning("Relay request failed: %s", e)
            detail = str(e) or connection_hint(self.relay.base_url)
            return self.add_message(Role.ASSISTANT, f"Error: {detail}")
        finally:
            self.is_loading = False
