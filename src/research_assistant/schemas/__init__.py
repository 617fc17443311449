"""Schemas package - request/response models for the research assistant."""

from research_assistant.schemas.events import (
    APOLOGY_MESSAGE,
    DONE_FRAME,
    ContentEvent,
    DoneEvent,
    ErrorEvent,
    SourcesEvent,
    StreamEvent,
    format_frame,
)
from research_assistant.schemas.internal import GenerationResult, RetrievalResult, SourceType
from research_assistant.schemas.requests import (
    ChatCompletionRequest,
    ChatRequest,
    Message,
    SummarizeRequest,
)
from research_assistant.schemas.responses import ErrorResponse, SourceRef, SummarizeResponse
from research_assistant.schemas.sessions import (
    BookmarkedMessage,
    CurrentSession,
    ResearchSession,
    SessionCreate,
    SessionMessage,
    SessionUpdate,
    TagRequest,
)

__all__ = [
    # Requests
    "ChatRequest",
    "Message",
    "SummarizeRequest",
    "ChatCompletionRequest",
    # Responses
    "SourceRef",
    "SummarizeResponse",
    "ErrorResponse",
    # Internal
    "SourceType",
    "RetrievalResult",
    "GenerationResult",
    # Stream events
    "ContentEvent",
    "SourcesEvent",
    "DoneEvent",
    "ErrorEvent",
    "StreamEvent",
    "format_frame",
    "DONE_FRAME",
    "APOLOGY_MESSAGE",
    # Sessions
    "ResearchSession",
    "SessionMessage",
    "SessionCreate",
    "SessionUpdate",
    "TagRequest",
    "CurrentSession",
    "BookmarkedMessage",
]
