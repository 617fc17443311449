"""Research session endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse

from research_assistant.api.dependencies import get_session_store
from research_assistant.schemas import (
    BookmarkedMessage,
    CurrentSession,
    ResearchSession,
    SessionCreate,
    SessionMessage,
    SessionUpdate,
    TagRequest,
)
from research_assistant.services.sessions import (
    SessionStore,
    export_json,
    export_markdown,
    generate_title,
    shareable_text,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])

Store = Annotated[SessionStore, Depends(get_session_store)]


def _get_or_404(store: SessionStore, session_id: str) -> ResearchSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


@router.get("", response_model=list[ResearchSession])
def list_sessions(
    store: Store,
    q: Annotated[str | None, Query(description="Search titles and message text")] = None,
    tag: Annotated[str | None, Query(description="Only sessions carrying this tag")] = None,
) -> list[ResearchSession]:
    """List sessions, most recently updated first."""
    sessions = store.search(q) if q else store.get_all()
    if tag:
        sessions = [s for s in sessions if tag in s.tags]
    return sessions


@router.post("", response_model=ResearchSession, status_code=status.HTTP_201_CREATED)
def create_session(body: SessionCreate, store: Store) -> ResearchSession:
    """Create a session; untitled sessions are named after their first question."""
    session = ResearchSession(
        title=body.title or generate_title(body.messages),
        messages=body.messages,
        tags=body.tags,
    )
    return store.save(session)


@router.delete("")
def delete_all_sessions(store: Store) -> dict:
    """Delete every session."""
    return {"deleted": store.delete_all()}


@router.get("/current", response_model=CurrentSession)
def get_current_session(store: Store) -> CurrentSession:
    return CurrentSession(session_id=store.get_current_session_id())


@router.put("/current", response_model=CurrentSession)
def set_current_session(body: CurrentSession, store: Store) -> CurrentSession:
    if body.session_id:
        _get_or_404(store, body.session_id)
    store.set_current_session_id(body.session_id)
    return body


@router.get("/bookmarks", response_model=list[BookmarkedMessage])
def list_bookmarks(store: Store) -> list[BookmarkedMessage]:
    """All bookmarked messages across sessions."""
    return store.get_bookmarked_messages()


@router.get("/{session_id}", response_model=ResearchSession)
def get_session(session_id: str, store: Store) -> ResearchSession:
    return _get_or_404(store, session_id)


@router.put("/{session_id}", response_model=ResearchSession)
def update_session(session_id: str, body: SessionUpdate, store: Store) -> ResearchSession:
    """Replace the fields present in the body."""
    session = _get_or_404(store, session_id)
    updates = body.model_dump(exclude_none=True)
    if "messages" in updates:
        updates["messages"] = body.messages
    return store.save(session.model_copy(update=updates))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, store: Store) -> Response:
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/tags", response_model=ResearchSession)
def add_tag(session_id: str, body: TagRequest, store: Store) -> ResearchSession:
    session = store.add_tag(session_id, body.tag)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


@router.delete("/{session_id}/tags/{tag}", response_model=ResearchSession)
def remove_tag(session_id: str, tag: str, store: Store) -> ResearchSession:
    session = store.remove_tag(session_id, tag)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


@router.post("/{session_id}/messages/{message_id}/bookmark", response_model=SessionMessage)
def toggle_bookmark(session_id: str, message_id: str, store: Store) -> SessionMessage:
    """Flip the bookmark flag on one message."""
    message = store.toggle_bookmark(session_id, message_id)
    if message is None:
        raise HTTPException(
            status_code=404,
            detail=f"Message not found: {session_id}/{message_id}",
        )
    return message


@router.get("/{session_id}/export")
def export_session(
    session_id: str,
    store: Store,
    format: Literal["markdown", "json", "text"] = "markdown",
) -> Response:
    """Export a session as Markdown, JSON or a plain-text transcript."""
    session = _get_or_404(store, session_id)
    if format == "json":
        return Response(
            content=export_json(session),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{session.id}.json"'},
        )
    if format == "text":
        return PlainTextResponse(shareable_text(session))
    return PlainTextResponse(
        export_markdown(session),
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{session.id}.md"'},
    )
