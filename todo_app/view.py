"""Projection of state into a UI tree, and HTML serialization of that tree.

`render` is pure: it reads a `State` and returns plain `Node` values. Event
handlers are data, not closures: a binding names the message an event
dispatches, so the tree can be inspected in tests and shipped to a browser.
"""

from __future__ import annotations

import html
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Union

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
    message_to_dict,
)
from todo_app.session import EditSession, FocusHandle
from todo_app.store import Todo, TodoStore
from todo_app.update import State

ENTER_KEY = "Enter"
ESCAPE_KEY = "Escape"
NEW_TODO_PLACEHOLDER = "What needs to be done?"

VOID_TAGS = {"input", "br", "hr", "img", "meta", "link"}


@dataclass(frozen=True)
class Send:
    """Dispatch a fixed message."""

    message: Message


@dataclass(frozen=True)
class OnValue:
    """Dispatch a message built from the element's current value."""

    factory: Callable[[str], Message]


@dataclass(frozen=True)
class OnKeys:
    """Dispatch per pressed key; unbound keys dispatch nothing."""

    keys: dict[str, Message]


Binding = Union[Send, OnValue, OnKeys]


@dataclass
class Node:
    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list[Union["Node", str]] = field(default_factory=list)
    events: dict[str, Binding] = field(default_factory=dict)
    key: str | None = None
    ref: FocusHandle | None = None

    @property
    def classes(self) -> list[str]:
        return [name for name in str(self.attrs.get("class", "")).split() if name]

    def text(self) -> str:
        parts = []
        for child in self.children:
            parts.append(child if isinstance(child, str) else child.text())
        return "".join(parts)

    def trigger(
        self, event: str, value: str | None = None, key: str | None = None
    ) -> Message | None:
        """Return the message this node dispatches for `event`, if any."""
        binding = self.events.get(event)
        if binding is None:
            return None
        if isinstance(binding, Send):
            return binding.message
        if isinstance(binding, OnValue):
            return binding.factory(value if value is not None else "")
        if isinstance(binding, OnKeys):
            return binding.keys.get(key or "")
        return None


def h(
    tag: str,
    *children: Union[Node, str, None],
    events: dict[str, Binding] | None = None,
    key: str | None = None,
    ref: FocusHandle | None = None,
    **attrs: Any,
) -> Node:
    """Build a node; `class_` maps to `class`, None children are skipped."""
    if "class_" in attrs:
        attrs["class"] = attrs.pop("class_")
    return Node(
        tag=tag,
        attrs=attrs,
        children=[child for child in children if child is not None],
        events=dict(events or {}),
        key=key,
        ref=ref,
    )


# ---------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------


def render(state: State) -> list[Node]:
    nodes = [view_head(state.pending_new_title)]
    if len(state.store):
        nodes.append(view_list(state.store, state.session))
    return nodes


def view_head(new_title: str) -> Node:
    return h(
        "header",
        h("h1", "todos"),
        h(
            "input",
            class_="new-todo",
            placeholder=NEW_TODO_PLACEHOLDER,
            autofocus=True,
            value=new_title,
            events={
                "input": OnValue(SetNewTitle),
                "keydown": OnKeys({ENTER_KEY: CreateFromPending()}),
            },
        ),
        h("button", "Clear All", class_="clear", events={"click": Send(ClearAll())}),
        class_="header",
    )


def view_list(store: TodoStore, session: EditSession | None) -> Node:
    rows = [view_row(todo, session) for todo in store]
    return h("div", h("ul", *rows, class_="todo-list"), class_="todo-section")


def view_row(todo: Todo, session: EditSession | None) -> Node:
    selected = session is not None and session.id == todo.id
    classes = []
    if todo.complete:
        classes.append("completed")
    if selected:
        classes.append("editing")

    # the edit input takes the label's place in the selected row
    if selected:
        title = h(
            "input",
            class_="edit",
            value=session.working_title,
            ref=session.focus_handle,
            events={
                "input": OnValue(ChangeWorkingTitle),
                "keydown": OnKeys({ESCAPE_KEY: Deselect(), ENTER_KEY: CommitEdit()}),
                "blur": Send(CommitEdit()),
            },
        )
    else:
        title = h("label", todo.title, events={"dblclick": Send(SelectForEdit(todo.id))})

    return h(
        "li",
        h(
            "div",
            h(
                "input",
                class_="toggle",
                type="checkbox",
                checked=todo.complete,
                events={"change": Send(ToggleComplete(todo.id))},
            ),
            title,
            h("button", "X", class_="destroy", events={"click": Send(RemoveTodo(todo.id))}),
            class_="view",
        ),
        class_=" ".join(classes),
        key=todo.id,
    )


# ---------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------


def iter_nodes(nodes: Iterable[Union[Node, str]]) -> Iterator[Node]:
    """Depth-first walk over every node in a tree."""
    for node in nodes:
        if isinstance(node, str):
            continue
        yield node
        yield from iter_nodes(node.children)


def find_by_class(nodes: Iterable[Node], class_name: str) -> list[Node]:
    return [node for node in iter_nodes(nodes) if class_name in node.classes]


def find_by_ref(nodes: Iterable[Node], handle: FocusHandle) -> Node | None:
    for node in iter_nodes(nodes):
        if node.ref == handle:
            return node
    return None


# ---------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------


def _binding_to_dict(binding: Binding) -> dict[str, Any]:
    if isinstance(binding, Send):
        return {"send": message_to_dict(binding.message)}
    if isinstance(binding, OnValue):
        # value bindings are built from single-field message types
        sample = message_to_dict(binding.factory(""))
        field_name = next(name for name in sample if name != "type")
        return {"value": sample["type"], "field": field_name}
    return {"keys": {key: message_to_dict(msg) for key, msg in binding.keys.items()}}


def _render_attrs(node: Node) -> str:
    parts = []
    for name, value in node.attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
            continue
        if name == "class" and not value:
            continue
        parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    if node.key is not None:
        parts.append(f' data-key="{html.escape(node.key, quote=True)}"')
    if node.ref is not None:
        parts.append(f' data-ref="{html.escape(node.ref.token, quote=True)}"')
    for event, binding in node.events.items():
        encoded = json.dumps(_binding_to_dict(binding), separators=(",", ":"))
        parts.append(f' data-on-{event}="{html.escape(encoded, quote=True)}"')
    return "".join(parts)


def to_html(nodes: Iterable[Union[Node, str]]) -> str:
    out = []
    for node in nodes:
        if isinstance(node, str):
            out.append(html.escape(node, quote=False))
            continue
        attrs = _render_attrs(node)
        if node.tag in VOID_TAGS:
            out.append(f"<{node.tag}{attrs}>")
            continue
        out.append(f"<{node.tag}{attrs}>{to_html(node.children)}</{node.tag}>")
    return "".join(out)
