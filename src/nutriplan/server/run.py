"""Start the NutriPlan API with uvicorn.

Host, port, lifetime and reload are read from ``NUTRIPLAN_SERVER_HOST``,
``NUTRIPLAN_SERVER_PORT``, ``NUTRIPLAN_SERVER_DURATION`` and ``RELOAD``. The app
is built through :func:`nutriplan.server.app.create_app` inside the server
process, so settings are read when the server starts.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import uvicorn

from nutriplan.config import get_settings
from nutriplan.logging_utils import configure_logging

APP_FACTORY = "nutriplan.server.app:create_app"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

logger = logging.getLogger(__name__)


async def _serve_with_duration(server: uvicorn.Server, duration: float) -> None:
    """Run the server and shut it down after the specified duration."""

    async def _shutdown() -> None:
        await asyncio.sleep(duration)
        logger.info("Stopping NutriPlan API after %.1f seconds", duration)
        server.should_exit = True

    asyncio.create_task(_shutdown())
    await server.serve()


def _parse_duration(value: str | None) -> Optional[float]:
    if not value:
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid NUTRIPLAN_SERVER_DURATION '{value}': {exc}") from exc
    if parsed <= 0:
        raise SystemExit("NUTRIPLAN_SERVER_DURATION must be greater than 0 when provided.")
    return parsed


def _parse_port(value: str | None) -> int:
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid NUTRIPLAN_SERVER_PORT '{value}': {exc}") from exc
    if not 0 < port < 65536:
        raise SystemExit(f"NUTRIPLAN_SERVER_PORT must be between 1 and 65535, got {port}.")
    return port


def build_config(host: str, port: int, reload: bool = False) -> uvicorn.Config:
    settings = get_settings()
    return uvicorn.Config(
        APP_FACTORY,
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


def main() -> None:
    host = os.environ.get("NUTRIPLAN_SERVER_HOST", DEFAULT_HOST)
    port = _parse_port(os.environ.get("NUTRIPLAN_SERVER_PORT"))
    reload_enabled = os.environ.get("RELOAD") == "1"
    duration = _parse_duration(os.environ.get("NUTRIPLAN_SERVER_DURATION"))

    if reload_enabled and duration is not None:
        raise SystemExit("Use RELOAD=0 when specifying NUTRIPLAN_SERVER_DURATION.")

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, [settings.api_token or ""])
    logger.info(
        "Serving NutriPlan on http://%s:%s (database=%s, reload=%s)",
        host,
        port,
        settings.database_path,
        reload_enabled,
    )

    if reload_enabled:
        uvicorn.run(
            APP_FACTORY,
            host=host,
            port=port,
            reload=True,
            factory=True,
            log_level=settings.log_level.lower(),
            access_log=False,
        )
        return

    server = uvicorn.Server(build_config(host, port))

    if duration is not None:
        asyncio.run(_serve_with_duration(server, duration))
        return

    server.run()


if __name__ == "__main__":
    main()
