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


def _run(state, *messages):
    effect = None
    for message in messages:
        state, effect = transition(state, message)
    return state, effect


def _with_todo(title: str = "A"):
    state, _ = _run(State(), SetNewTitle(title), CreateFromPending())
    (todo_id,) = state.store.ids()
    return state, todo_id


def test_set_new_title_is_verbatim():
    state, effect = transition(State(), SetNewTitle("  draft "))

    assert state.pending_new_title == "  draft "
    assert effect is None


def test_create_from_blank_pending_title_changes_nothing():
    start = State(pending_new_title="   ")

    state, effect = transition(start, CreateFromPending())

    assert state is start
    assert len(state.store) == 0
    assert state.pending_new_title == "   "
    assert effect is None


def test_create_trims_title_and_clears_pending():
    state, _ = _run(State(), SetNewTitle("  Buy milk  "), CreateFromPending())

    (todo,) = list(state.store)
    assert todo.title == "Buy milk"
    assert todo.complete is False
    assert state.pending_new_title == ""


def test_two_creations_keep_creation_order():
    state, _ = _run(
        State(),
        SetNewTitle("first"),
        CreateFromPending(),
        SetNewTitle("second"),
        CreateFromPending(),
    )

    todos = list(state.store)
    assert [todo.title for todo in todos] == ["first", "second"]
    assert todos[0].id != todos[1].id
    assert todos[0].id < todos[1].id


def test_transition_does_not_mutate_previous_state():
    before, todo_id = _with_todo()

    after, _ = transition(before, ToggleComplete(todo_id))

    assert before.store.get(todo_id).complete is False
    assert after.store.get(todo_id).complete is True


def test_toggle_twice_restores_original_value():
    state, todo_id = _with_todo()

    state, _ = _run(state, ToggleComplete(todo_id), ToggleComplete(todo_id))

    assert state.store.get(todo_id).complete is False


def test_remove_twice_is_idempotent():
    state, todo_id = _with_todo()

    once, _ = transition(state, RemoveTodo(todo_id))
    twice, _ = transition(once, RemoveTodo(todo_id))

    assert len(once.store) == 0
    assert twice is once


def test_toggle_and_remove_of_absent_ids_are_noops():
    state, _ = _with_todo()

    assert transition(state, ToggleComplete("missing")).state is state
    assert transition(state, RemoveTodo("missing")).state is state


def test_select_for_edit_opens_session_with_focus_effect():
    state, todo_id = _with_todo("Buy milk")

    state, effect = transition(state, SelectForEdit(todo_id))

    assert state.editing
    assert state.session.id == todo_id
    assert state.session.working_title == "Buy milk"
    assert effect.handle == state.session.focus_handle
    assert effect.caret == 8


def test_select_for_absent_id_stays_idle_without_effect():
    state, _ = _with_todo()

    next_state, effect = transition(state, SelectForEdit("missing"))

    assert next_state.session is None
    assert effect is None


def test_deselect_discards_edits():
    state, todo_id = _with_todo("A")

    state, _ = _run(state, SelectForEdit(todo_id), ChangeWorkingTitle("B"), Deselect())

    assert state.session is None
    assert state.store.get(todo_id).title == "A"


def test_commit_writes_working_title_and_closes_session():
    state, todo_id = _with_todo("A")

    state, _ = _run(state, SelectForEdit(todo_id), ChangeWorkingTitle("B"), CommitEdit())

    assert state.session is None
    assert state.store.get(todo_id).title == "B"


def test_working_title_may_be_empty_while_editing():
    state, todo_id = _with_todo("A")

    state, _ = _run(state, SelectForEdit(todo_id), ChangeWorkingTitle(""))

    assert state.session.working_title == ""
    assert state.store.get(todo_id).title == "A"


def test_commit_of_blank_working_title_keeps_title():
    state, todo_id = _with_todo("A")

    state, _ = _run(state, SelectForEdit(todo_id), ChangeWorkingTitle("  "), CommitEdit())

    assert state.session is None
    assert state.store.get(todo_id).title == "A"


def test_commit_after_external_removal_closes_session():
    state, todo_id = _with_todo("A")

    state, _ = _run(
        state, SelectForEdit(todo_id), ChangeWorkingTitle("B"), RemoveTodo(todo_id), CommitEdit()
    )

    assert state.session is None
    assert len(state.store) == 0


def test_selecting_another_todo_discards_unsaved_edit():
    state, _ = _run(
        State(),
        SetNewTitle("one"),
        CreateFromPending(),
        SetNewTitle("two"),
        CreateFromPending(),
    )
    first, second = state.store.ids()

    state, _ = _run(
        state, SelectForEdit(first), ChangeWorkingTitle("edited"), SelectForEdit(second)
    )

    assert state.session.id == second
    assert state.session.working_title == "two"
    assert state.store.get(first).title == "one"


def test_clear_all_closes_open_session():
    state, todo_id = _with_todo()

    state, _ = _run(state, SelectForEdit(todo_id), ClearAll())

    assert len(state.store) == 0
    assert state.session is None


def test_edit_messages_without_session_are_noops():
    state, _ = _with_todo()

    for message in (ChangeWorkingTitle("x"), CommitEdit(), Deselect()):
        assert transition(state, message).state is state


def test_session_survives_toggle_of_its_todo():
    state, todo_id = _with_todo("A")

    state, _ = _run(state, SelectForEdit(todo_id), ToggleComplete(todo_id))

    assert state.session.id == todo_id
    assert state.store.get(todo_id).complete is True
