"""FastAPI entrypoint for the todo list editor."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import Body, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from todo_app.config import AppConfig, load_config
from todo_app.errors import TodoAppError, success_response
from todo_app.logging_config import setup_logging
from todo_app.messages import parse_message
from todo_app.page import render_page
from todo_app.runtime import RecordingSurface
from todo_app.user_scope import (
    AUTH_EXEMPT_PATHS,
    SERVICE_TOKEN_HEADER,
    USER_ID_HEADER,
    RuntimeRegistry,
    get_request_runtime,
    normalize_user_id,
)
from todo_app.view import to_html

logger = structlog.get_logger(__name__)


def _check_request_identity(request: Request) -> None:
    """Validate the user header and service token against the app config."""
    app_config = getattr(request.app.state, "config", None)
    require_user_header = bool(getattr(app_config, "require_user_header", False))
    service_token = getattr(app_config, "service_token", None)

    raw_user_id = request.headers.get(USER_ID_HEADER)
    if raw_user_id is None and require_user_header:
        raise TodoAppError(
            "AUTH_REQUIRED",
            "Missing required user identity header.",
            {"header": USER_ID_HEADER},
        )
    if raw_user_id is not None:
        request.state.user_id = normalize_user_id(raw_user_id)

    if service_token and request.headers.get(SERVICE_TOKEN_HEADER) != service_token:
        raise TodoAppError(
            "AUTH_FORBIDDEN",
            "Invalid service token.",
            {"header": SERVICE_TOKEN_HEADER},
        )


def create_app(config: AppConfig | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config is None:
            app.state.config = load_config()
        setup_logging(app.state.config.log_level, app.state.config.log_format)
        logger.info(
            "app.started",
            require_user_header=app.state.config.require_user_header,
            service_token=bool(app.state.config.service_token),
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.config = config
    app.state.runtimes = RuntimeRegistry()

    @app.middleware("http")
    async def enforce_request_identity(request: Request, call_next):
        if request.url.path in AUTH_EXEMPT_PATHS:
            return await call_next(request)
        try:
            _check_request_identity(request)
        except TodoAppError as exc:
            return exc.to_response()
        return await call_next(request)

    @app.exception_handler(TodoAppError)
    def handle_todo_app_error(request: Request, exc: TodoAppError) -> JSONResponse:
        return exc.to_response()

    @app.get("/health", status_code=200)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        runtime = get_request_runtime(request)
        return HTMLResponse(render_page(to_html(runtime.paint())))

    @app.get("/state")
    def read_state(request: Request) -> dict[str, Any]:
        runtime = get_request_runtime(request)
        return success_response({"state": runtime.state.to_dict()})

    @app.post("/dispatch")
    def dispatch(request: Request, payload: Any = Body(None)) -> dict[str, Any]:
        """Apply one message and return the repainted tree and focus effects."""
        message = parse_message(payload)
        runtime = get_request_runtime(request)
        state = runtime.dispatch(message)
        surface: RecordingSurface = runtime.surface
        logger.debug(
            "dispatch",
            user_id=request.state.user_id,
            message=payload.get("type"),
            effects=len(surface.instructions),
        )
        return success_response(
            {
                "html": to_html(surface.tree),
                "effects": list(surface.instructions),
                "state": state.to_dict(),
            }
        )

    return app


app = create_app()
