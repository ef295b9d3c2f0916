"""Payload validation helpers for wire messages."""

from __future__ import annotations

from typing import Any

from todo_app.errors import TodoAppError


def _ensure_payload_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise TodoAppError(
            "INVALID_TYPE",
            "Payload must be an object.",
            {"type": type(payload).__name__},
        )
    return payload


def _reject_unknown_fields(payload: dict[str, Any], allowed_fields: set[str]) -> None:
    unknown_fields = sorted(set(payload) - allowed_fields)
    if unknown_fields:
        raise TodoAppError(
            "UNKNOWN_FIELD",
            "Unknown fields are not allowed.",
            {"fields": unknown_fields},
        )


def _require_fields(payload: dict[str, Any], required_fields: list[str]) -> None:
    missing = [name for name in required_fields if name not in payload]
    if missing:
        raise TodoAppError(
            "MISSING_FIELDS",
            f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required.",
            {"fields": missing},
        )


def _require_str(payload: dict[str, Any], name: str) -> str:
    value = payload[name]
    if not isinstance(value, str):
        raise TodoAppError(
            "INVALID_TYPE",
            f"{name} must be a string.",
            {name: str(value), "type": type(value).__name__},
        )
    return value
