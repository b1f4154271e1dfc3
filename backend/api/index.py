"""Vercel ASGI function entrypoint for the Rubric Score backend."""
from starlette.responses import Response

from rubricscore.main import app as inner_app
from rubricscore.settings import settings


class StripPrefix:
    """Serve the app under ``prefix`` and answer CORS preflights directly."""

    def __init__(self, app, prefix: str, allowed_origins: list[str] | None = None):
        self.app = app
        self.prefix = prefix
        self.allowed_origins = allowed_origins if allowed_origins is not None else settings.cors_origin_list

    def _allow_origin(self, origin: str | None) -> str | None:
        if "*" in self.allowed_origins:
            return "*"
        if origin and origin in self.allowed_origins:
            return origin
        return None

    async def __call__(self, scope, receive, send):
        if scope["type"] in ("http", "websocket"):
            path = scope.get("path", "")
            if path.startswith(self.prefix):
                scope = dict(scope)
                scope["path"] = path[len(self.prefix):] or "/"

        if scope["type"] == "http" and scope.get("method") == "OPTIONS":
            request_headers = {k.decode("latin1").lower(): v.decode("latin1") for k, v in scope.get("headers", [])}
            headers = {
                "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
                "Access-Control-Allow-Headers": request_headers.get("access-control-request-headers", "*"),
            }
            allow_origin = self._allow_origin(request_headers.get("origin"))
            if allow_origin is not None:
                headers["Access-Control-Allow-Origin"] = allow_origin
            await Response(status_code=204, headers=headers)(scope, receive, send)
            return

        await self.app(scope, receive, send)


app = StripPrefix(inner_app, "/api")
