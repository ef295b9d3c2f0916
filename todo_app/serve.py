"""Console entrypoint: run the service under uvicorn."""

from __future__ import annotations

import uvicorn

from todo_app.config import load_config


def main() -> None:
    config = load_config()
    uvicorn.run(
        "todo_app.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
