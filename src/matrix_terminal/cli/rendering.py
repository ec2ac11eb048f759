"""Terminal chrome rendered with Rich."""

from __future__ import annotations

from datetime import datetime

from rich.panel import Panel
from rich.text import Text

from matrix_terminal.llm.types import ChatMessage, Role

PROMPT_HOST = "matrix-terminal@ai-coach:~$"

USER_STYLE = "bright_green"
ASSISTANT_STYLE = "green"
DIM_STYLE = "dim green"


def format_timestamp(moment: datetime) -> str:
    """24-hour ``HH:MM:SS``."""
    return moment.strftime("%H:%M:%S")


def message_prefix(role: Role) -> str:
    return "> " if role == Role.USER else ">> "


def render_header() -> Panel:
    dots = Text.assemble(("● ", "red"), ("● ", "yellow"), ("● ", "green"))
    return Panel(
        Text.assemble(dots, (f" {PROMPT_HOST}", ASSISTANT_STYLE)),
        border_style="green",
        expand=True,
    )


def render_message(message: ChatMessage) -> Text:
    style = USER_STYLE if message.role == Role.USER else ASSISTANT_STYLE
    text = Text()
    text.append(message_prefix(message.role), style="dark_green")
    text.append(message.content, style=style)
    text.append(f"\n   [{format_timestamp(message.timestamp)}]", style=DIM_STYLE)
    return text


def render_loading() -> Text:
    return Text.assemble((">> ", "dark_green"), ("Processing your request...", f"blink {ASSISTANT_STYLE}"))


def render_footer() -> Text:
    return Text("Press ENTER to send • Ctrl+C or Ctrl+D to exit", style=DIM_STYLE)
