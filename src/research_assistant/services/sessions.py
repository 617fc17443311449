"""File-backed store for research sessions.

Storage model:
- One file per session: {sessions_dir}/{session_id}.json
- Current-session pointer: {sessions_dir}/current_session.json
- Writes go to a ``.tmp_*`` file in the same directory, then ``os.replace``;
  listings ignore those temp files
"""

import json
import os
import re
import tempfile
import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from research_assistant.observability import get_logger
from research_assistant.observability.constants import LogEvents
from research_assistant.schemas.internal import RetrievalResult
from research_assistant.schemas.responses import SourceRef
from research_assistant.schemas.sessions import (
    SESSION_ID_PATTERN,
    BookmarkedMessage,
    ResearchSession,
    SessionMessage,
)

logger = get_logger(__name__)

DEFAULT_TITLE = "New Research Session"
TITLE_MAX_LENGTH = 50
CURRENT_SESSION_FILE = "current_session.json"
TEMP_FILE_PREFIX = ".tmp_"

_SESSION_ID_PATTERN = re.compile(SESSION_ID_PATTERN)


def atomic_write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Write JSON data to a file atomically (temp file + fsync + os.replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=TEMP_FILE_PREFIX, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def generate_title(messages: Iterable[SessionMessage]) -> str:
    """Title a session after its first user turn."""
    first_user = next((m for m in messages if m.role == "user"), None)
    if first_user is None:
        return DEFAULT_TITLE

    content = first_user.content.strip()
    if len(content) <= TITLE_MAX_LENGTH:
        return content
    return content[: TITLE_MAX_LENGTH - 3] + "..."


class SessionStore:
    """Keyed persistence for research sessions.

    Per-session files are authoritative. Unreadable files are skipped with
    a warning rather than failing the whole listing.
    """

    def __init__(self, sessions_dir: str | Path):
        self.sessions_dir = Path(sessions_dir).expanduser()
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Internal file operations
    # -------------------------------------------------------------------------

    def _session_path(self, session_id: str) -> Path | None:
        if not _SESSION_ID_PATTERN.fullmatch(session_id):
            return None
        return self.sessions_dir / f"{session_id}.json"

    def _load(self, path: Path) -> ResearchSession | None:
        try:
            return ResearchSession.model_validate_json(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValidationError, ValueError) as e:
            logger.warning(LogEvents.SESSION_LOAD_FAILED, path=str(path), error=str(e))
            return None

    def _write(self, session: ResearchSession) -> None:
        path = self._session_path(session.id)
        if path is None:
            raise ValueError(f"Invalid session id: {session.id!r}")
        atomic_write_json(path, session.model_dump(mode="json"))

    # -------------------------------------------------------------------------
    # Key-value contract
    # -------------------------------------------------------------------------

    def get_all(self) -> list[ResearchSession]:
        """All sessions, most recently updated first."""
        if not self.sessions_dir.exists():
            return []

        sessions = []
        for path in self.sessions_dir.glob("*.json"):
            # In-flight or abandoned atomic writes
            if path.name == CURRENT_SESSION_FILE or path.name.startswith(TEMP_FILE_PREFIX):
                continue
            session = self._load(path)
            if session is not None:
                sessions.append(session)

        sessions.sort(key=lambda s: s.updated_at, reverse=True)
        return sessions

    def get(self, session_id: str) -> ResearchSession | None:
        path = self._session_path(session_id)
        if path is None:
            return None
        return self._load(path)

    def save(self, session: ResearchSession) -> ResearchSession:
        """Insert or replace a session, stamping its modification time."""
        with self._lock:
            saved = session.model_copy(update={"updated_at": datetime.now(timezone.utc)})
            self._write(saved)
        logger.debug(LogEvents.SESSION_SAVED, session_id=saved.id)
        return saved

    def delete(self, session_id: str) -> bool:
        """Delete a session; returns False if it did not exist."""
        path = self._session_path(session_id)
        if path is None:
            return False

        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            if self.get_current_session_id() == session_id:
                self.set_current_session_id(None)
        return True

    def delete_all(self) -> int:
        """Delete every session and the current-session pointer."""
        with self._lock:
            sessions = self.get_all()
            for session in sessions:
                path = self._session_path(session.id)
                if path is not None:
                    path.unlink(missing_ok=True)
            (self.sessions_dir / CURRENT_SESSION_FILE).unlink(missing_ok=True)
        return len(sessions)

    def get_current_session_id(self) -> str | None:
        path = self.sessions_dir / CURRENT_SESSION_FILE
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(LogEvents.SESSION_LOAD_FAILED, path=str(path), error=str(e))
            return None
        return data.get("session_id") if isinstance(data, dict) else None

    def set_current_session_id(self, session_id: str | None) -> None:
        path = self.sessions_dir / CURRENT_SESSION_FILE
        with self._lock:
            if session_id:
                atomic_write_json(path, {"session_id": session_id})
            else:
                path.unlink(missing_ok=True)

    # -------------------------------------------------------------------------
    # Derived operations
    # -------------------------------------------------------------------------

    def search(self, query: str) -> list[ResearchSession]:
        """Sessions whose title or any message contains ``query`` (case-insensitive)."""
        needle = query.lower()
        return [
            s
            for s in self.get_all()
            if needle in s.title.lower() or any(needle in m.content.lower() for m in s.messages)
        ]

    def add_tag(self, session_id: str, tag: str) -> ResearchSession | None:
        with self._lock:
            session = self.get(session_id)
            if session is None:
                return None
            if tag in session.tags:
                return session
            return self.save(session.model_copy(update={"tags": [*session.tags, tag]}))

    def remove_tag(self, session_id: str, tag: str) -> ResearchSession | None:
        with self._lock:
            session = self.get(session_id)
            if session is None:
                return None
            tags = [t for t in session.tags if t != tag]
            return self.save(session.model_copy(update={"tags": tags}))

    def toggle_bookmark(self, session_id: str, message_id: str) -> SessionMessage | None:
        """Flip a message's bookmark flag; returns the updated message."""
        with self._lock:
            session = self.get(session_id)
            if session is None:
                return None

            toggled = None
            messages = []
            for message in session.messages:
                if message.id == message_id:
                    message = message.model_copy(update={"bookmarked": not message.bookmarked})
                    toggled = message
                messages.append(message)

            if toggled is None:
                return None
            self.save(session.model_copy(update={"messages": messages}))
            return toggled

    def get_bookmarked_messages(self) -> list[BookmarkedMessage]:
        return [
            BookmarkedMessage(session_id=s.id, session_title=s.title, message=m)
            for s in self.get_all()
            for m in s.messages
            if m.bookmarked
        ]

    def append_exchange(
        self,
        session_id: str,
        user_content: str,
        assistant_content: str,
        sources: list[RetrievalResult],
    ) -> ResearchSession:
        """Append a completed question/answer pair, creating the session if needed."""
        with self._lock:
            session = self.get(session_id) or ResearchSession(id=session_id)
            source_refs = [SourceRef(**r.to_source_ref()) for r in sources]
            messages = [
                *session.messages,
                SessionMessage(role="user", content=user_content),
                SessionMessage(
                    role="assistant",
                    content=assistant_content,
                    sources=source_refs or None,
                ),
            ]
            title = session.title
            if title == DEFAULT_TITLE:
                title = generate_title(messages)
            return self.save(session.model_copy(update={"messages": messages, "title": title}))


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def export_json(session: ResearchSession) -> str:
    return session.model_dump_json(indent=2)


def export_markdown(session: ResearchSession) -> str:
    """Render a session as a Markdown document."""
    lines = [
        f"# {session.title}",
        "",
        f"**Created:** {_format_timestamp(session.created_at)}",
        f"**Updated:** {_format_timestamp(session.updated_at)}",
        "",
    ]
    if session.tags:
        lines += [f"**Tags:** {', '.join(session.tags)}", ""]
    lines += ["---", ""]

    for message in session.messages:
        if message.role == "user":
            lines += ["## User", "", message.content, ""]
        else:
            lines += ["## Assistant", "", message.content, ""]
            if message.sources:
                lines += ["### Sources", ""]
                for i, source in enumerate(message.sources, 1):
                    lines.append(f"{i}. [{source.title}]({source.url})")
                    lines += [f"   > {source.snippet}", ""]
        lines += ["---", ""]

    return "\n".join(lines)


def shareable_text(session: ResearchSession) -> str:
    """Plain-text Q/A transcript with source links."""
    parts = [f"{session.title}\n\n"]
    for message in session.messages:
        if message.role == "user":
            parts.append(f"Q: {message.content}\n\n")
            continue
        parts.append(f"A: {message.content}\n\n")
        if message.sources:
            parts.append("Sources:\n")
            parts.extend(f"- {source.title}: {source.url}\n" for source in message.sources)
            parts.append("\n")
    return "".join(parts)
