"""Chat message model exchanged with the completion provider."""

from enum import Enum
from pydantic import BaseModel, Field


class Role(str, Enum):
    """Speaker of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One turn of a conversation. Role ordering is left to the caller."""

    model_config = {"frozen": True}

    role: Role = Field(description="system, user or assistant")
    content: str = Field(description="Message text")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)
