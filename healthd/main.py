"""healthd — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every miss to the plain-text 404 reply
    - No slash redirects and no docs routes: anything but GET /health is a 404
    - Exactly one startup line on stdout naming the bound address

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern
    - create_app() factory: tests build isolated apps, module-level `app`
      serves `uvicorn healthd.main:app`
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from healthd.api.error_handlers import register_error_handlers
from healthd.api.routes import health
from healthd.config import get_settings
from healthd.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("healthd started")
    yield
    logger.info("healthd shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="healthd",
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    app.include_router(health.router)
    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Serve the ASGI app with uvicorn on the configured address.

    The socket is bound before the startup line is printed, so a failed bind
    prints nothing and port 0 reports the port actually bound.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    config = uvicorn.Config(
        "healthd.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        # uvicorn loggers propagate to the root handler
        log_config=None,
    )
    sock = config.bind_socket()
    host, port = sock.getsockname()[:2]
    print(f"Server listening on http://{host}:{port}", flush=True)
    uvicorn.Server(config).run(sockets=[sock])
