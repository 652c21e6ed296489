#!/usr/bin/env python3
"""
TimeWaves - FastAPI service for tide outlooks

Serves the nearest-station tide outlook (high, low and current water levels)
for a coordinate, and free-text place search, as JSON for the mobile client.
"""

# Standard library imports
import contextlib
import logging
import os
import signal
from typing import Any, AsyncGenerator, Awaitable, Callable

# Third-party imports
import aiohttp
import fastapi
import uvicorn
from fastapi import Request, Response

# Local imports
from tidewaves import api, config, logging_utils
from tidewaves.clients.coops import CoopsApi
from tidewaves.clients.nominatim import NominatimApi

# API response headers for preventing caching
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncGenerator[None, None]:
    """Create the shared HTTP session and provider clients.

    Args:
        app: The FastAPI application instance

    Yields:
        None when setup is complete
    """
    settings = app.state.settings
    timeout = aiohttp.ClientTimeout(total=settings.request_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        app.state.http_session = session
        app.state.coops_client = CoopsApi(
            session,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
            application=settings.application,
            base_url=settings.coops_data_url,
            stations_url=settings.coops_stations_url,
        )
        app.state.nominatim_client = NominatimApi(
            session,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
            user_agent=settings.user_agent,
            base_url=settings.nominatim_url,
            limit=settings.search_limit,
        )
        yield
        logging.info("-----------------------------------------------")
        logging.info("Shutting down app")


async def add_cache_control_headers(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Add cache control headers to API responses to prevent caching."""
    response = await call_next(request)

    if request.url.path.startswith("/api/"):
        for name, value in NO_CACHE_HEADERS.items():
            response.headers[name] = value

    return response


def create_app(settings: config.Settings | None = None) -> fastapi.FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use instead of the ones read from the environment
    """
    app = fastapi.FastAPI(title="TimeWaves", lifespan=lifespan)
    app.state.settings = settings or config.get()
    app.middleware("http")(add_cache_control_headers)
    api.register_routes(app)
    return app


def setup_signal_handlers() -> None:
    """Set up signal handlers to log when specific signals are received.

    Note: Only registers a handler for SIGTERM, as handling SIGINT would
    interfere with the default Ctrl+C behavior that uvicorn relies on.
    """
    original_sigterm_handler = signal.getsignal(signal.SIGTERM)

    def sigterm_handler(sig: int, frame: Any) -> None:
        logging.warning("Received SIGTERM signal, beginning shutdown")
        if callable(original_sigterm_handler):
            original_sigterm_handler(sig, frame)

    signal.signal(signal.SIGTERM, sigterm_handler)


def start_app() -> fastapi.FastAPI:
    """Initialize and return the FastAPI application.

    Sets up logging based on the environment (Google Cloud Run or local).

    Returns:
        Configured FastAPI application instance
    """
    logging_utils.setup_logging()
    logging.info("***********************************************")
    logging.info("Starting app")

    setup_signal_handlers()

    return create_app()


if __name__ == "__main__":
    uvicorn.run(
        "tidewaves.main:start_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8080)),
        log_level="info",
    )
