"""Chat data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# Telegram uses integer chat ids; other transports may use strings
ChatId = Union[int, str]


class MessageRole(str, Enum):
    """Message author role."""

    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """One message in a session's history."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    def to_api(self) -> dict[str, str]:
        """Render as the role/content dict sent to the backend."""
        return {"role": self.role.value, "content": self.content}


class ChatSession(BaseModel):
    """Per-chat state: the selected model and the turn history."""

    chat_id: ChatId
    model: str
    history: list[Turn] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def turn_count(self) -> int:
        return len(self.history)

    def messages_for_api(self) -> list[dict[str, str]]:
        """Full ordered history in backend wire format."""
        return [turn.to_api() for turn in self.history]
