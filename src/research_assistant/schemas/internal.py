"""Internal DTOs used within the research assistant service."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Information source a retrieval result came from.

    Values are the names clients send in ``ChatRequest.sources``.
    """

    WEB = "web"
    CODE_HOST = "github"
    SOCIAL = "twitter"
    MARKET_DATA = "crypto"

    @property
    def label(self) -> str:
        """Display label used for context section headings."""
        return self.value.capitalize()


class RetrievalResult(BaseModel):
    """One normalized hit from any provider."""

    title: str = Field(..., min_length=1, description="Display title")
    url: str = Field(..., description="Canonical link to the original resource")
    snippet: str = Field(..., description="Short excerpt, possibly truncated")
    content: str | None = Field(
        default=None, description="Longer text preferred for context building"
    )
    source: SourceType = Field(default=SourceType.WEB, description="Source group tag")
    metadata: dict[str, Any] | None = Field(
        default=None, description="Provider-specific fields for presentation only"
    )

    @property
    def body(self) -> str:
        """Text used in the model context: content if present, else snippet."""
        return self.content or self.snippet

    def to_source_ref(self) -> dict[str, str]:
        """Project to the wire shape of a ``sources`` frame entry."""
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "source": self.source.value,
        }


class GenerationResult(BaseModel):
    """Result of a non-streaming model call."""

    response: str = Field(..., description="Generated response text")
    latency_ms: int = Field(..., description="Generation time in milliseconds")
    usage: dict | None = Field(default=None, description="Token usage if available")
