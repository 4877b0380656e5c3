"""Cross-origin headers middleware."""

import logging
from typing import Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def cors_headers(allow_origin: str = "*") -> Dict[str, str]:
    """Headers attached to every response."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Adds permissive CORS headers and answers every OPTIONS request.

    Unlike Starlette's CORSMiddleware, OPTIONS is answered with a bare 200
    whether or not the request is a proper preflight, and the headers are
    sent regardless of the request's Origin.
    """

    def __init__(self, app, allow_origin: str = "*"):
        """Initialize CORS middleware.

        Args:
            app: FastAPI application instance
            allow_origin: Value for Access-Control-Allow-Origin
        """
        super().__init__(app)
        self.headers = cors_headers(allow_origin)
        logger.info(f"CORS enabled for origin: {allow_origin}")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Short-circuit OPTIONS, otherwise decorate the downstream response.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/endpoint in chain

        Returns:
            HTTP response carrying the CORS headers
        """
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.headers)

        response = await call_next(request)
        response.headers.update(self.headers)
        return response
