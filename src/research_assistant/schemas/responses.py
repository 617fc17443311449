"""Response schemas for the research assistant API."""

from pydantic import BaseModel, Field

from research_assistant.schemas.internal import SourceType


class SourceRef(BaseModel):
    """A source entry as delivered to the client."""

    title: str = Field(..., description="Display title")
    url: str = Field(..., description="Link to the original resource")
    snippet: str = Field(..., description="Short excerpt")
    source: SourceType | None = Field(default=None, description="Source group tag")


class SummarizeResponse(BaseModel):
    """Response from the summarize endpoint."""

    summary: str = Field(..., description="Concise summary of the conversation")


class ErrorResponse(BaseModel):
    """Error response body."""

    error: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(default=None, description="Additional error detail")
