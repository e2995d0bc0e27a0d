"""JSON:API error handling middleware."""

import logging
from http import HTTPStatus
from typing import Any

from jsonapi_response.core.errors import JSONAPIError
from jsonapi_response.core.formatter import JSONAPIFormatter

log = logging.getLogger(__name__)


class ErrorHandlerMiddleware:
    """Convert exceptions into JSON:API error documents."""

    def __init__(self, app: Any, formatter: JSONAPIFormatter | None = None) -> None:
        """Store the ASGI app for middleware chaining."""
        self.app = app
        self.formatter = formatter or JSONAPIFormatter()

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Handle exceptions and serialize JSON:API error documents."""
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return
        try:
            await self.app(scope, receive, send)
        except JSONAPIError as exc:
            log.warning("%s: %s", type(exc).__name__, exc.detail or exc.errors)
            response = self.formatter.error_response(exc.errors, status=exc.status_code)
            await response(scope, receive, send)
        except Exception:
            log.exception("Unhandled error in %s %s", scope.get("method"), scope.get("path"))
            status = HTTPStatus.INTERNAL_SERVER_ERROR
            response = self.formatter.error_response(
                [{"status": str(status.value), "title": status.phrase}],
                status=status.value,
            )
            await response(scope, receive, send)
