"""Configuration loading for the todo service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
LOG_FORMATS = {"console", "json"}
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18180


class ConfigError(RuntimeError):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class AppConfig:
    require_user_header: bool = False
    service_token: str | None = None
    log_level: str = "INFO"
    log_format: str = "console"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        name = name.strip()
        if name != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _read_value(dotenv_path: Path, key: str) -> str | None:
    raw_value = os.environ.get(key)
    if raw_value is None:
        raw_value = _read_dotenv_value(dotenv_path, key)
    if raw_value is None:
        return None
    return raw_value.strip() or None


def _read_bool(raw_value: str | None, *, default: bool, key: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if not normalized:
        return default
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{key} must be a boolean value.")


def _read_port(raw_value: str | None, *, key: str) -> int:
    if raw_value is None:
        return DEFAULT_PORT
    try:
        port = int(raw_value)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer.") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"{key} must be between 1 and 65535.")
    return port


def load_config() -> AppConfig:
    """Load configuration from the environment, falling back to ./.env."""
    dotenv_path = Path.cwd() / ".env"

    require_user_key = "TODO_APP_REQUIRE_USER_HEADER"
    require_user_header = _read_bool(
        _read_value(dotenv_path, require_user_key), default=False, key=require_user_key
    )

    service_token = _read_value(dotenv_path, "TODO_APP_SERVICE_TOKEN")

    log_level_key = "TODO_APP_LOG_LEVEL"
    log_level = (_read_value(dotenv_path, log_level_key) or "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"{log_level_key} must be one of {', '.join(sorted(LOG_LEVELS))}."
        )

    log_format_key = "TODO_APP_LOG_FORMAT"
    log_format = (_read_value(dotenv_path, log_format_key) or "console").lower()
    if log_format not in LOG_FORMATS:
        raise ConfigError(
            f"{log_format_key} must be one of {', '.join(sorted(LOG_FORMATS))}."
        )

    port_key = "TODO_APP_PORT"
    port = _read_port(_read_value(dotenv_path, port_key), key=port_key)

    return AppConfig(
        require_user_header=require_user_header,
        service_token=service_token,
        log_level=log_level,
        log_format=log_format,
        host=_read_value(dotenv_path, "TODO_APP_HOST") or DEFAULT_HOST,
        port=port,
    )
