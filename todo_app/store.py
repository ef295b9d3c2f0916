"""Ordered in-memory todo store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from todo_app.ids import IdGenerator, TodoId, default_generator


@dataclass
class Todo:
    id: TodoId
    title: str
    complete: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "complete": self.complete}


class TodoStore:
    """Mapping of TodoId to Todo, iterated in id order.

    Every operation is defined for every id: toggling, removing or renaming
    an absent id does nothing.
    """

    def __init__(self, generator: IdGenerator | None = None) -> None:
        self._generator = generator or default_generator
        self._todos: dict[TodoId, Todo] = {}

    def __len__(self) -> int:
        return len(self._todos)

    def __contains__(self, todo_id: object) -> bool:
        return todo_id in self._todos

    def __iter__(self) -> Iterator[Todo]:
        for todo_id in sorted(self._todos):
            yield self._todos[todo_id]

    def get(self, todo_id: TodoId) -> Todo | None:
        return self._todos.get(todo_id)

    def ids(self) -> list[TodoId]:
        return sorted(self._todos)

    def copy(self) -> TodoStore:
        """Return an independent store sharing the same id generator."""
        clone = TodoStore(self._generator)
        clone._todos = {
            todo_id: Todo(todo.id, todo.title, todo.complete)
            for todo_id, todo in self._todos.items()
        }
        return clone

    def create(self, title: str) -> TodoId | None:
        """Insert a new incomplete todo; blank titles are rejected."""
        trimmed = title.strip()
        if not trimmed:
            return None
        todo_id = self._generator.new_id()
        self._todos[todo_id] = Todo(id=todo_id, title=trimmed, complete=False)
        return todo_id

    def toggle_complete(self, todo_id: TodoId) -> None:
        todo = self._todos.get(todo_id)
        if todo is not None:
            todo.complete = not todo.complete

    def remove(self, todo_id: TodoId) -> None:
        self._todos.pop(todo_id, None)

    def clear_all(self) -> None:
        self._todos.clear()

    def rename(self, todo_id: TodoId, new_title: str) -> None:
        """Overwrite the stored title verbatim."""
        todo = self._todos.get(todo_id)
        if todo is not None:
            todo.title = new_title

    def to_list(self) -> list[dict[str, Any]]:
        return [todo.to_dict() for todo in self]
