"""Client-facing stream events and their wire encoding.

Every frame is ``data: <json>\\n\\n``; the stream ends with ``data: [DONE]\\n\\n``.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Literal

from research_assistant.schemas.internal import RetrievalResult

DONE_FRAME = "data: [DONE]\n\n"

APOLOGY_MESSAGE = "Sorry, I encountered an error. Please check your API key and try again."


def format_frame(payload: dict[str, Any]) -> str:
    """Format a JSON payload as one wire frame."""
    return f"data: {json.dumps(payload)}\n\n"


@dataclass(frozen=True)
class ContentEvent:
    """An incremental text delta of the answer."""

    type: Literal["content"] = field(default="content", repr=False)
    content: str = ""

    def encode(self) -> str:
        return format_frame({"content": self.content})


@dataclass(frozen=True)
class SourcesEvent:
    """The ordered list of results used for this answer."""

    type: Literal["sources"] = field(default="sources", repr=False)
    sources: tuple[RetrievalResult, ...] = ()

    def encode(self) -> str:
        return format_frame({"sources": [r.to_source_ref() for r in self.sources]})


@dataclass(frozen=True)
class DoneEvent:
    """Terminal marker, always last."""

    type: Literal["done"] = field(default="done", repr=False)

    def encode(self) -> str:
        return DONE_FRAME


@dataclass(frozen=True)
class ErrorEvent:
    """Failure notice; travels on the wire as a content frame with the apology text."""

    type: Literal["error"] = field(default="error", repr=False)
    message: str = APOLOGY_MESSAGE

    def encode(self) -> str:
        return format_frame({"content": self.message})


StreamEvent = ContentEvent | SourcesEvent | DoneEvent | ErrorEvent
