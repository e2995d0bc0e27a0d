"""HTTP method override middleware."""

from typing import Any

from jsonapi_response.config import JSONAPISettings


class MethodOverrideMiddleware:
    """Rewrite the request method from an override header.

    A ``POST`` carrying ``X-HTTP-Method-Override: PATCH`` is routed as a
    ``PATCH``; only paths under the configured prefixes are affected.
    """

    def __init__(self, app: Any, settings: JSONAPISettings | None = None) -> None:
        self.app = app
        self.settings = (settings or JSONAPISettings()).method_override

    def applies_to(self, path: str) -> bool:
        for prefix in self.settings.apply_to_prefixes:
            prefix = prefix.rstrip("/")
            if not prefix or path == prefix or path.startswith(prefix + "/"):
                return True
        return False

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        config = self.settings
        if (
            scope.get("type") == "http"
            and config.enabled
            and scope.get("method", "").upper() == config.from_method.upper()
            and self.applies_to(scope.get("path", ""))
        ):
            header = config.header.lower().encode()
            for key, value in scope.get("headers", []):
                if key.lower() != header:
                    continue
                if value.decode("latin-1").strip().upper() == config.to_method.upper():
                    scope = {**scope, "method": config.to_method.upper()}
                break
        await self.app(scope, receive, send)
