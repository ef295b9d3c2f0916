from todo_app.messages import (
    ChangeWorkingTitle,
    ClearAll,
    CommitEdit,
    CreateFromPending,
    Deselect,
    RemoveTodo,
    SelectForEdit,
    SetNewTitle,
    ToggleComplete,
)
from todo_app.update import State, transition
from todo_app.view import find_by_class, find_by_ref, iter_nodes, render, to_html


def _state_with(*titles: str) -> State:
    state = State()
    for title in titles:
        state = transition(state, SetNewTitle(title)).state
        state = transition(state, CreateFromPending()).state
    return state


def test_empty_store_omits_list_section():
    tree = render(State(pending_new_title="draft"))

    assert [node.tag for node in tree] == ["header"]
    assert find_by_class(tree, "todo-list") == []
    (new_todo,) = find_by_class(tree, "new-todo")
    assert new_todo.attrs["value"] == "draft"


def test_one_row_per_todo_in_id_order():
    state = _state_with("first", "second", "third")

    tree = render(state)

    (todo_list,) = find_by_class(tree, "todo-list")
    assert [row.key for row in todo_list.children] == state.store.ids()
    assert [row.text() for row in todo_list.children] == ["firstX", "secondX", "thirdX"]


def test_header_bindings():
    tree = render(State())
    (new_todo,) = find_by_class(tree, "new-todo")
    (clear,) = find_by_class(tree, "clear")

    assert new_todo.trigger("input", value="milk") == SetNewTitle("milk")
    assert new_todo.trigger("keydown", key="Enter") == CreateFromPending()
    assert new_todo.trigger("keydown", key="a") is None
    assert clear.trigger("click") == ClearAll()


def test_row_bindings_carry_the_todo_id():
    state = _state_with("task")
    (todo_id,) = state.store.ids()
    tree = render(state)

    (toggle,) = find_by_class(tree, "toggle")
    (destroy,) = find_by_class(tree, "destroy")
    (view,) = find_by_class(tree, "view")
    label = next(node for node in view.children if node.tag == "label")

    assert toggle.attrs["checked"] is False
    assert toggle.trigger("change") == ToggleComplete(todo_id)
    assert destroy.trigger("click") == RemoveTodo(todo_id)
    assert label.trigger("dblclick") == SelectForEdit(todo_id)


def test_completed_row_is_marked():
    state = _state_with("task")
    (todo_id,) = state.store.ids()
    state = transition(state, ToggleComplete(todo_id)).state

    tree = render(state)

    (row,) = find_by_class(tree, "completed")
    assert row.key == todo_id
    (toggle,) = find_by_class(tree, "toggle")
    assert toggle.attrs["checked"] is True


def test_only_selected_row_has_edit_input():
    state = _state_with("one", "two")
    first, second = state.store.ids()
    state = transition(state, SelectForEdit(second)).state
    state = transition(state, ChangeWorkingTitle("draft")).state

    tree = render(state)

    (edit,) = find_by_class(tree, "edit")
    (editing_row,) = find_by_class(tree, "editing")
    assert editing_row.key == second
    assert edit.attrs["value"] == "draft"
    assert edit.ref == state.session.focus_handle
    assert find_by_ref(tree, state.session.focus_handle) is edit
    assert edit.trigger("input", value="x") == ChangeWorkingTitle("x")
    assert edit.trigger("keydown", key="Enter") == CommitEdit()
    assert edit.trigger("keydown", key="Escape") == Deselect()
    assert edit.trigger("keydown", key="Tab") is None
    assert edit.trigger("blur") == CommitEdit()


def test_editing_row_replaces_label_with_edit_input():
    state = _state_with("one", "two")
    first, second = state.store.ids()
    state = transition(state, SelectForEdit(second)).state

    tree = render(state)

    (editing_row,) = find_by_class(tree, "editing")
    assert [node.tag for node in iter_nodes([editing_row]) if node.tag == "label"] == []
    assert [node.classes for node in find_by_class([editing_row], "view")[0].children] == [
        ["toggle"],
        ["edit"],
        ["destroy"],
    ]

    labels = [node for node in iter_nodes(tree) if node.tag == "label"]
    assert [label.text() for label in labels] == ["one"]
    assert len(find_by_class(tree, "edit")) == 1
    assert find_by_class(tree, "todo-count") == []


def test_to_html_escapes_and_encodes_bindings():
    state = _state_with("<b>bold</b> & more")
    (todo_id,) = state.store.ids()

    markup = to_html(render(state))

    assert "&lt;b&gt;bold&lt;/b&gt; &amp; more" in markup
    assert "<b>bold" not in markup
    assert f'data-key="{todo_id}"' in markup
    assert "data-on-dblclick=" in markup
    assert "&quot;SelectForEdit&quot;" in markup
    assert 'placeholder="What needs to be done?"' in markup
    assert " autofocus" in markup
    assert 'type="checkbox"' in markup
    assert " checked" not in markup


def test_to_html_encodes_value_bindings_and_refs():
    state = _state_with("task")
    (todo_id,) = state.store.ids()
    state = transition(state, SelectForEdit(todo_id)).state

    markup = to_html(render(state))

    assert f'data-ref="{state.session.focus_handle.token}"' in markup
    assert "&quot;value&quot;:&quot;ChangeWorkingTitle&quot;" in markup
    assert "&quot;field&quot;:&quot;text&quot;" in markup
