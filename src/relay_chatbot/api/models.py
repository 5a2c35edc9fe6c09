"""API request/response models."""

from typing import Literal

from pydantic import BaseModel, Field

from relay_chatbot.relay.models import Message, Role


class HistoryMessage(BaseModel):
    """One prior turn supplied by the client."""

    role: Literal["system", "user", "assistant"]
    content: str

    def to_message(self) -> Message:
        return Message(role=Role(self.role), content=self.content)


class ChatRequest(BaseModel):
    """Request model for the streaming chat endpoint."""

    message: str = Field(description="New user message")
    use_search: bool = Field(default=False, description="Offer the web_search tool to the model")
    history: list[HistoryMessage] = Field(
        default_factory=list, description="Prior conversation, oldest first"
    )

    def history_messages(self) -> list[Message]:
        return [m.to_message() for m in self.history]


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    version: str
