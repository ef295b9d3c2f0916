"""Application state and the transition function."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, NamedTuple

import structlog

from todo_app.messages import (
    ChangeWorkingTitle,
    ClearAll,
    CommitEdit,
    CreateFromPending,
    Deselect,
    Message,
    RemoveTodo,
    SelectForEdit,
    SetNewTitle,
    ToggleComplete,
)
from todo_app.session import EditSession, FocusEffect, commit_session, open_session
from todo_app.store import TodoStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class State:
    """Whole application state; replaced, never mutated, by `transition`."""

    pending_new_title: str = ""
    store: TodoStore = field(default_factory=TodoStore)
    session: EditSession | None = None

    @property
    def editing(self) -> bool:
        return self.session is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pendingNewTitle": self.pending_new_title,
            "todos": self.store.to_list(),
            "session": self.session.to_dict() if self.session else None,
        }


class Transition(NamedTuple):
    state: State
    effect: FocusEffect | None = None


def transition(state: State, message: Message) -> Transition:
    """Apply one message. Every message is accepted; bad targets are no-ops."""
    logger.debug("transition", message=type(message).__name__)

    if isinstance(message, SetNewTitle):
        return Transition(replace(state, pending_new_title=message.text))

    if isinstance(message, CreateFromPending):
        if not state.pending_new_title.strip():
            return Transition(state)
        store = state.store.copy()
        store.create(state.pending_new_title)
        return Transition(replace(state, store=store, pending_new_title=""))

    if isinstance(message, ToggleComplete):
        if message.id not in state.store:
            return Transition(state)
        store = state.store.copy()
        store.toggle_complete(message.id)
        return Transition(replace(state, store=store))

    if isinstance(message, RemoveTodo):
        if message.id not in state.store:
            return Transition(state)
        store = state.store.copy()
        store.remove(message.id)
        return Transition(replace(state, store=store))

    if isinstance(message, ClearAll):
        store = state.store.copy()
        store.clear_all()
        session = state.session
        if session is not None and session.id not in store:
            session = None
        return Transition(replace(state, store=store, session=session))

    if isinstance(message, SelectForEdit):
        opened = open_session(state.store, message.id)
        if opened is None:
            return Transition(state)
        session, effect = opened
        return Transition(replace(state, session=session), effect)

    if isinstance(message, Deselect):
        if state.session is None:
            return Transition(state)
        return Transition(replace(state, session=None))

    if isinstance(message, ChangeWorkingTitle):
        if state.session is None:
            return Transition(state)
        return Transition(
            replace(state, session=state.session.with_title(message.text))
        )

    if isinstance(message, CommitEdit):
        if state.session is None:
            return Transition(state)
        store = state.store.copy()
        commit_session(store, state.session)
        return Transition(replace(state, store=store, session=None))

    logger.warning("transition.unknown_message", message=repr(message))
    return Transition(state)
