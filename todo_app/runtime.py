"""Dispatch loop: owns one state, paints it, and runs after-paint callbacks."""

from __future__ import annotations

import threading
from typing import Any, Callable, Protocol

import structlog

from todo_app.messages import Message
from todo_app.session import FocusEffect, FocusHandle
from todo_app.update import State, transition
from todo_app.view import Node, find_by_ref, render

logger = structlog.get_logger(__name__)


class FocusTarget(Protocol):
    def focus(self) -> None: ...

    def set_selection_range(self, start: int, end: int) -> None: ...


class Surface(Protocol):
    """Where rendered trees are mounted."""

    def mount(self, tree: list[Node]) -> None: ...

    def find(self, handle: FocusHandle) -> FocusTarget | None: ...


class _RecordedElement:
    def __init__(self, surface: RecordingSurface, ref: str) -> None:
        self._surface = surface
        self._ref = ref

    def focus(self) -> None:
        self._surface.instructions.append({"type": "focus", "ref": self._ref})

    def set_selection_range(self, start: int, end: int) -> None:
        self._surface.instructions.append(
            {"type": "select", "ref": self._ref, "start": start, "end": end}
        )


class RecordingSurface:
    """Surface that records focus instructions for a remote client to replay."""

    def __init__(self) -> None:
        self.tree: list[Node] = []
        self.instructions: list[dict[str, Any]] = []

    def mount(self, tree: list[Node]) -> None:
        self.tree = tree
        self.instructions = []

    def find(self, handle: FocusHandle) -> _RecordedElement | None:
        if find_by_ref(self.tree, handle) is None:
            return None
        return _RecordedElement(self, handle.token)


class Runtime:
    """Runs messages through `transition` one at a time.

    A focus effect is queued as a one-shot callback and runs after the next
    paint, once the edit input exists in the mounted tree.
    """

    def __init__(self, state: State | None = None, surface: Surface | None = None) -> None:
        self.state = state if state is not None else State()
        self.surface = surface if surface is not None else RecordingSurface()
        self._after_paint: list[Callable[[], None]] = []
        self._lock = threading.RLock()

    def render(self) -> list[Node]:
        return render(self.state)

    def dispatch(self, message: Message, *, paint: bool = True) -> State:
        """Apply `message`; with paint=False the next paint is left to the caller."""
        with self._lock:
            result = transition(self.state, message)
            self.state = result.state
            if result.effect is not None:
                self.after_next_paint(self._focus_callback(result.effect))
            if paint:
                self.paint()
            return self.state

    def after_next_paint(self, callback: Callable[[], None]) -> None:
        self._after_paint.append(callback)

    def paint(self) -> list[Node]:
        with self._lock:
            tree = self.render()
            self.surface.mount(tree)
            callbacks, self._after_paint = self._after_paint, []
            for callback in callbacks:
                callback()
            return tree

    def _focus_callback(self, effect: FocusEffect) -> Callable[[], None]:
        def place_focus() -> None:
            try:
                target = self.surface.find(effect.handle)
                if target is None:
                    logger.debug("focus.skipped", reason="target not mounted")
                    return
                target.focus()
                target.set_selection_range(effect.caret, effect.caret)
            except Exception as exc:
                logger.debug("focus.failed", error=repr(exc))

        return place_focus
