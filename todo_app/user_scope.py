"""Request-scoped user identity and per-user runtimes."""

from __future__ import annotations

import re
import threading

from fastapi import Request

from todo_app.errors import TodoAppError
from todo_app.runtime import Runtime

USER_ID_HEADER = "X-Todo-User-Id"
SERVICE_TOKEN_HEADER = "X-Todo-Service-Token"
AUTH_EXEMPT_PATHS = {"/health"}
DEFAULT_USER_ID = "local"

_VALID_USER_ID = re.compile(r"^[A-Za-z0-9_]{3,128}$")


def normalize_user_id(raw_user_id: str) -> str:
    """Normalize and validate a user id from request context."""
    if not isinstance(raw_user_id, str):
        raise TodoAppError(
            "INVALID_USER_ID",
            "User id must be a string.",
            {"type": type(raw_user_id).__name__},
        )

    normalized = raw_user_id.strip().replace("-", "")
    if not normalized:
        raise TodoAppError(
            "AUTH_REQUIRED",
            "Missing required user identity header.",
            {"header": USER_ID_HEADER},
        )

    if not _VALID_USER_ID.fullmatch(normalized):
        raise TodoAppError(
            "INVALID_USER_ID",
            "User id contains invalid characters.",
            {"user_id": raw_user_id},
        )
    return normalized


class RuntimeRegistry:
    """One in-memory runtime per user id, created on first use."""

    def __init__(self) -> None:
        self._runtimes: dict[str, Runtime] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._runtimes)

    def get(self, user_id: str) -> Runtime:
        with self._lock:
            runtime = self._runtimes.get(user_id)
            if runtime is None:
                runtime = Runtime()
                self._runtimes[user_id] = runtime
            return runtime


def get_request_user_id(request: Request) -> str:
    """Read and cache the normalized user id; falls back to the local user."""
    cached = getattr(request.state, "user_id", None)
    if isinstance(cached, str) and cached.strip():
        normalized = normalize_user_id(cached)
        request.state.user_id = normalized
        return normalized

    raw_user_id = request.headers.get(USER_ID_HEADER)
    normalized = DEFAULT_USER_ID if raw_user_id is None else normalize_user_id(raw_user_id)
    request.state.user_id = normalized
    return normalized


def get_request_runtime(request: Request) -> Runtime:
    registry: RuntimeRegistry = request.app.state.runtimes
    return registry.get(get_request_user_id(request))
