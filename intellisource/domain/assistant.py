from typing import List, Literal

from pydantic import Field

from .envelope import CamelModel


class ChatMessage(CamelModel):
    sender: Literal["user", "ai"]
    text: str


class ChatRequest(CamelModel):
    """A new user turn plus the conversation so far (oldest first)."""
    message: str = Field(..., max_length=4000)
    history: List[ChatMessage] = Field(default_factory=list, max_length=50)


class ChatReply(CamelModel):
    reply: str
