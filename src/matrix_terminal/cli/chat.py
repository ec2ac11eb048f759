"""Interactive Matrix Terminal with Rich output and prompt_toolkit input."""

from __future__ import annotations

import asyncio
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from matrix_terminal.cli.relay_client import RelayClient
from matrix_terminal.cli.rendering import (
    render_footer,
    render_header,
    render_loading,
    render_message,
)
from matrix_terminal.cli.session import TerminalSession
from matrix_terminal.core.config import Settings

logger = logging.getLogger(__name__)


class MatrixTerminal:
    """Terminal chat front-end for the relay."""

    def __init__(self, settings: Settings, relay: RelayClient | None = None) -> None:
        self._settings = settings
        self._console = Console()
        self._relay = relay or RelayClient(settings.api_url)
        self._session = TerminalSession.start(self._relay)

    async def handle_message(self, user_input: str) -> None:
        """Submit one message and print the turns it added."""
        seen = len(self._session.messages)
        with self._console.status(render_loading(), spinner="dots", spinner_style="green"):
            await self._session.submit(user_input)
        for message in self._session.messages[seen:]:
            self._console.print(render_message(message))

    async def run(self) -> None:
        """Main interactive chat loop."""
        self._console.print(render_header())
        for message in self._session.messages:
            self._console.print(render_message(message))
        self._console.print(render_footer())

        prompt_session: PromptSession = PromptSession(history=InMemoryHistory())

        try:
            while True:
                try:
                    user_input = await prompt_session.prompt_async("$ ")
                except (EOFError, KeyboardInterrupt):
                    self._console.print("\n[dim green]Connection closed.[/dim green]")
                    break

                if not user_input.strip():
                    continue
                await self.handle_message(user_input)
        finally:
            await self._relay.close()


async def ask_once(settings: Settings, question: str) -> str:
    """Send a single question through the relay and return the reply line."""
    relay = RelayClient(settings.api_url)
    session = TerminalSession.start(relay, greeting=None)
    try:
        reply = await session.submit(question)
    finally:
        await relay.close()
    return reply.content if reply else ""


async def check_health(settings: Settings) -> str:
    relay = RelayClient(settings.api_url)
    try:
        data = await relay.health()
    finally:
        await relay.close()
    return str(data.get("status", "unknown"))


def run_terminal(settings: Settings) -> None:
    asyncio.run(MatrixTerminal(settings).run())
