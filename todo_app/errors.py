"""Errors raised at the HTTP boundary and the JSON envelopes they render to.

The state core never raises; only decoding a wire message or checking the
caller's identity can fail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from fastapi.responses import JSONResponse

# codes that are not request-shape problems
STATUS_BY_CODE = {
    "AUTH_REQUIRED": 401,
    "INVALID_USER_ID": 401,
    "AUTH_FORBIDDEN": 403,
}
DEFAULT_STATUS = 400


@dataclass(frozen=True)
class ErrorResponse:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE.get(self.code, DEFAULT_STATUS)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class TodoAppError(RuntimeError):
    """A rejected request; `error.status_code` is the HTTP status it maps to."""

    def __init__(
        self, code: str, message: str, details: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.error = ErrorResponse(
            code=code, message=message, details=dict(details or {})
        )

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.error.status_code, content=error_response(self.error)
        )


def success_response(payload: dict[str, Any]) -> dict[str, Any]:
    return {"ok": True, "data": payload}


def error_response(error: ErrorResponse) -> dict[str, Any]:
    return {"ok": False, "error": error.to_dict()}
