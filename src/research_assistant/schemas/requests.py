"""Request schemas for the research assistant API."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from research_assistant.schemas.internal import SourceType
from research_assistant.schemas.sessions import SESSION_ID_PATTERN


class Message(BaseModel):
    """A message in a chat conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request to the streaming chat endpoint."""

    message: str = Field(..., min_length=1, description="The user's research question")
    sources: list[SourceType] = Field(
        default_factory=lambda: [SourceType.WEB],
        description="Sources to search; defaults to web when absent or empty",
    )
    history: list[Message] = Field(
        default_factory=list,
        description="Prior conversation turns, oldest first",
    )
    session_id: str | None = Field(
        default=None,
        pattern=SESSION_ID_PATTERN,
        description="Session to append the completed exchange to",
    )

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value

    @field_validator("sources", mode="before")
    @classmethod
    def _default_sources(cls, value: object) -> object:
        if value is None or value == []:
            return [SourceType.WEB]
        return value

    @field_validator("sources")
    @classmethod
    def _dedupe_sources(cls, value: list[SourceType]) -> list[SourceType]:
        return list(dict.fromkeys(value))


class SummarizeRequest(BaseModel):
    """Request to summarize a conversation transcript."""

    conversation: str = Field(default="", description="Conversation transcript to summarize")


class ChatCompletionRequest(BaseModel):
    """Request body for the model provider's OpenAI-compatible chat completions API."""

    model: str = Field(..., description="Model identifier")
    messages: list[Message] = Field(..., description="List of messages in the conversation")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_tokens: int = Field(default=1024, description="Maximum tokens to generate")
    stream: bool = Field(default=False, description="Enable streaming response")
