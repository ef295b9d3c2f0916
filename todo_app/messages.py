"""Messages: the only way state changes.

Each user intent is a frozen dataclass carrying the id or text it needs.
`message_to_dict` and `parse_message` convert messages to and from the JSON
objects posted to the dispatch endpoint.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Union

from todo_app.errors import TodoAppError
from todo_app.ids import TodoId
from todo_app.payload import (
    _ensure_payload_dict,
    _reject_unknown_fields,
    _require_fields,
    _require_str,
)


@dataclass(frozen=True)
class SetNewTitle:
    text: str


@dataclass(frozen=True)
class CreateFromPending:
    pass


@dataclass(frozen=True)
class ToggleComplete:
    id: TodoId


@dataclass(frozen=True)
class RemoveTodo:
    id: TodoId


@dataclass(frozen=True)
class ClearAll:
    pass


@dataclass(frozen=True)
class SelectForEdit:
    id: TodoId


@dataclass(frozen=True)
class Deselect:
    pass


@dataclass(frozen=True)
class ChangeWorkingTitle:
    text: str


@dataclass(frozen=True)
class CommitEdit:
    pass


Message = Union[
    SetNewTitle,
    CreateFromPending,
    ToggleComplete,
    RemoveTodo,
    ClearAll,
    SelectForEdit,
    Deselect,
    ChangeWorkingTitle,
    CommitEdit,
]

MESSAGE_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        SetNewTitle,
        CreateFromPending,
        ToggleComplete,
        RemoveTodo,
        ClearAll,
        SelectForEdit,
        Deselect,
        ChangeWorkingTitle,
        CommitEdit,
    )
}


def message_to_dict(message: Message) -> dict[str, Any]:
    return {"type": type(message).__name__, **asdict(message)}


def parse_message(payload: Any) -> Message:
    """Build a message from a wire payload such as {"type": "RemoveTodo", "id": ...}."""
    payload = _ensure_payload_dict(payload)
    _require_fields(payload, ["type"])
    message_type = payload["type"]
    cls = MESSAGE_TYPES.get(message_type) if isinstance(message_type, str) else None
    if cls is None:
        raise TodoAppError(
            "UNKNOWN_MESSAGE",
            "Unknown message type.",
            {"type": str(message_type), "allowed": sorted(MESSAGE_TYPES)},
        )

    field_names = [item.name for item in fields(cls)]
    _reject_unknown_fields(payload, {"type", *field_names})
    _require_fields(payload, field_names)
    return cls(**{name: _require_str(payload, name) for name in field_names})
