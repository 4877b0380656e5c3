"""Exception handlers rendering the JSON error envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from weather_proxy.middleware.cors import cors_headers
from weather_proxy.weather.errors import ProxyError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the proxy error handlers on the FastAPI app."""
    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    """Render a ProxyError with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected failures as a 500 envelope.

    This runs outside the middleware stack, so CORS headers are set here.
    """
    logger.exception(f"Unexpected error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=cors_headers(request.app.state.settings.cors_allow_origin)
    )
