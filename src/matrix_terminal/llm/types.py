"""Types for LLM interactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ChatMessage:
    role: Role
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_api(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class LLMConfig:
    """Configuration for the LLM client."""

    model: str
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    timeout: float | None = None
