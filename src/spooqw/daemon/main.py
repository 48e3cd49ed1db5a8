"""SpooqW config service — FastAPI app exposing the config language over HTTP."""

import logging
import sys

import uvicorn
from fastapi import FastAPI

from spooqw import __version__
from spooqw.api.router import api_router
from spooqw.core.config import configure_logging, get_settings

logger = logging.getLogger("spooqw")


def create_app() -> FastAPI:
    app = FastAPI(
        title="SpooqW Config Service",
        description="Validate, parse, render and merge SpooqW pipeline configs",
        version=__version__,
    )

    app.include_router(api_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


def main():
    """Entry point for `spooqwd` command."""
    settings = get_settings()
    configure_logging(settings.log_level)

    host = settings.host
    port = settings.port

    # Parse CLI args (simple, no dep on typer for the service)
    args = sys.argv[1:]
    for i, arg in enumerate(args):
        if arg == "--port" and i + 1 < len(args):
            port = int(args[i + 1])
        if arg == "--host" and i + 1 < len(args):
            host = args[i + 1]

    logger.info(f"Starting SpooqW config service v{__version__} on {host}:{port}")

    app = create_app()
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
