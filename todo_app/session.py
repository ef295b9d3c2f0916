"""Single-selection edit session.

An edit session holds a detached copy of one todo's title. Changes to the
working title never reach the store until the session is committed, and the
store can change under an open session without affecting it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from todo_app.ids import TodoId
from todo_app.store import TodoStore


@dataclass(frozen=True)
class FocusHandle:
    """Opaque reference to the edit input of one rendered session."""

    token: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class FocusEffect:
    """Request to focus `handle` after the next paint, caret at `caret`."""

    handle: FocusHandle
    caret: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "focus", "ref": self.handle.token, "caret": self.caret}


@dataclass(frozen=True)
class EditSession:
    id: TodoId
    working_title: str
    focus_handle: FocusHandle

    def with_title(self, text: str) -> EditSession:
        return replace(self, working_title=text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "workingTitle": self.working_title,
            "ref": self.focus_handle.token,
        }


def utf16_length(text: str) -> int:
    """Length of `text` in UTF-16 code units, as text inputs count carets."""
    return len(text.encode("utf-16-le")) // 2


def open_session(
    store: TodoStore, todo_id: TodoId
) -> tuple[EditSession, FocusEffect] | None:
    """Start editing `todo_id`; returns None when the id is not stored."""
    todo = store.get(todo_id)
    if todo is None:
        return None
    session = EditSession(
        id=todo_id, working_title=todo.title, focus_handle=FocusHandle()
    )
    return session, FocusEffect(session.focus_handle, utf16_length(todo.title))


def commit_session(store: TodoStore, session: EditSession) -> None:
    """Write the working title back under the same rule creation uses.

    A blank working title leaves the stored title unchanged.
    """
    if session.id not in store:
        return
    title = session.working_title.strip()
    if title:
        store.rename(session.id, title)
