"""Schemas for persisted research sessions."""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from research_assistant.schemas.responses import SourceRef

# Session ids double as file names in the session store
SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,128}$"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class SessionMessage(BaseModel):
    """One turn of a persisted conversation."""

    id: str = Field(default_factory=_new_id)
    role: Literal["user", "assistant"]
    content: str
    sources: list[SourceRef] | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
    bookmarked: bool = False


class ResearchSession(BaseModel):
    """A persisted conversation record."""

    id: str = Field(default_factory=_new_id, pattern=SESSION_ID_PATTERN)
    title: str = "New Research Session"
    messages: list[SessionMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    tags: list[str] = Field(default_factory=list)


class SessionCreate(BaseModel):
    """Body for creating a session."""

    title: str | None = None
    messages: list[SessionMessage] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class SessionUpdate(BaseModel):
    """Body for replacing a session's mutable fields."""

    title: str | None = None
    messages: list[SessionMessage] | None = None
    tags: list[str] | None = None


class TagRequest(BaseModel):
    """Body for adding a tag."""

    tag: str = Field(..., min_length=1)


class CurrentSession(BaseModel):
    """The session the client last had open."""

    session_id: str | None = None


class BookmarkedMessage(BaseModel):
    """A bookmarked message together with the session it belongs to."""

    session_id: str
    session_title: str
    message: SessionMessage
