"""Error types raised while proxying requests to OpenWeatherMap."""

from typing import Optional


BAD_GATEWAY = 502


def allows_body(status_code: int) -> bool:
    return status_code >= 200 and status_code not in (204, 304)


class ProxyError(Exception):
    """Base class for every failure surfaced to API callers.

    Each subclass carries the HTTP status it maps to and a default message.
    """
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message if message is not None else self.message
        super().__init__(self.message)

    def to_response(self) -> dict:
        """Build the JSON error envelope."""
        return {"error": self.message}


class MissingParameter(ProxyError):
    """Raised when a required query parameter is absent or blank."""
    status_code = 400
    message = "Missing required query parameter"


class CredentialNotConfigured(ProxyError):
    """Raised when no OpenWeatherMap API key is configured."""
    status_code = 500
    message = "API key not configured"


class UpstreamUnreachable(ProxyError):
    """Raised when the upstream service cannot be reached."""
    status_code = 503
    message = "Failed to connect to the upstream service"


class UpstreamError(ProxyError):
    """Raised when the upstream service answers with a non-200 status.

    The upstream status code is re-emitted and the raw body is passed on
    under ``details``. Statuses that cannot carry a body (1xx, 204, 304)
    are answered with 502 instead.
    """
    message = "Error from the upstream service"

    def __init__(self, status_code: int, body: str, message: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = status_code
        self.status_code = status_code if allows_body(status_code) else BAD_GATEWAY
        self.body = body

    def to_response(self) -> dict:
        return {"error": self.message, "details": self.body}


class ResponseReadFailure(ProxyError):
    """Raised when a 200 response body cannot be read."""
    status_code = 500
    message = "Failed to read the upstream response"


class UpstreamParseFailure(ProxyError):
    """Raised when the upstream payload cannot be decoded."""
    status_code = 500
    message = "Failed to parse the upstream response"
