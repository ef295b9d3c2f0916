import re

from todo_app.page import CLIENT_JS, render_page


def test_render_page_wraps_body_and_script():
    page = render_page('<header class="header"></header>')

    assert page.startswith("<!DOCTYPE html>")
    assert '<section id="app" class="todoapp"><header class="header"></header></section>' in page
    assert f"<script>{CLIENT_JS}</script>" in page


def test_client_chains_dispatches_in_event_order():
    assert "queue = queue.then(() => send(message, swap))" in CLIENT_JS

    handler = CLIENT_JS[CLIENT_JS.index("function handle(event)") :]
    assert re.findall(r"\b(enqueue|send)\(", handler) == ["enqueue", "enqueue", "enqueue"]


def test_client_skips_missing_focus_targets():
    assert "if (!el) continue;" in CLIENT_JS
    assert "setSelectionRange(effect.start, effect.end)" in CLIENT_JS
