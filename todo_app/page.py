"""HTML page shell and the client script that replays bindings and effects."""

from __future__ import annotations

import html

PAGE_TITLE = "todos"

CLIENT_JS = r"""
(function () {
  const app = document.getElementById("app");

  function applyEffects(effects) {
    for (const effect of effects || []) {
      const el = app.querySelector('[data-ref="' + effect.ref + '"]');
      if (!el) continue;
      try {
        if (effect.type === "focus") el.focus();
        if (effect.type === "select") el.setSelectionRange(effect.start, effect.end);
      } catch (err) {
        // element went away between paint and focus
      }
    }
  }

  // one request in flight at a time, in event order
  let queue = Promise.resolve();

  function enqueue(message, swap) {
    queue = queue.then(() => send(message, swap)).catch(() => {});
    return queue;
  }

  async function send(message, swap) {
    const response = await fetch("dispatch", {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(message),
    });
    const body = await response.json();
    if (!body.ok || !swap) return;
    const hadFocus = document.activeElement && document.activeElement.classList.contains("new-todo");
    app.innerHTML = body.data.html;
    if (hadFocus) {
      const input = app.querySelector(".new-todo");
      if (input) input.focus();
    }
    applyEffects(body.data.effects);
  }

  function handle(event) {
    const name = event.type === "focusout" ? "blur" : event.type;
    const target = event.target.closest("[data-on-" + name + "]");
    if (!target || !app.contains(target)) return;
    const binding = JSON.parse(target.getAttribute("data-on-" + name));
    if (binding.send) {
      enqueue(binding.send, true);
    } else if (binding.value) {
      const message = {type: binding.value};
      message[binding.field] = target.value;
      enqueue(message, false);
    } else if (binding.keys && binding.keys[event.key]) {
      enqueue(binding.keys[event.key], true);
    }
  }

  for (const name of ["input", "keydown", "change", "click", "dblclick", "focusout"]) {
    app.addEventListener(name, handle);
  }
})();
"""


def render_page(body_html: str) -> str:
    """Wrap a rendered tree in a full HTML document."""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{html.escape(PAGE_TITLE)}</title>\n"
        "</head>\n"
        "<body>\n"
        f'<section id="app" class="todoapp">{body_html}</section>\n'
        f"<script>{CLIENT_JS}</script>\n"
        "</body>\n"
        "</html>\n"
    )
