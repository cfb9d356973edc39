from __future__ import annotations

from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_204_NO_CONTENT, HTTP_403_FORBIDDEN

from ..utils.responses import err

ALLOW_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, X-Request-ID"


def parse_origins(value: str | None) -> list[str]:
    """Split a comma separated origin list; ``*`` means any origin."""

    origins = [o.strip() for o in (value or "").split(",") if o.strip()]
    return [] if "*" in origins else origins


class CORSMiddleware(BaseHTTPMiddleware):
    """CORS for the customer and staff apps with an optional origin whitelist.

    An empty whitelist allows every origin. Preflight requests are answered
    here without reaching the routes.
    """

    def __init__(
        self,
        app: Callable,
        allowed_origins: Iterable[str] | None = None,
        max_age: int = 3600,
    ) -> None:
        super().__init__(app)
        self.allowed = set(allowed_origins or [])
        self.max_age = max_age

    def _permits(self, origin: str) -> bool:
        return not self.allowed or origin in self.allowed

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[override]
        origin = request.headers.get("origin")
        if origin and not self._permits(origin):
            return JSONResponse(
                err("Origin not allowed"),
                status_code=HTTP_403_FORBIDDEN,
                headers={"Vary": "Origin"},
            )
        if origin and request.method == "OPTIONS" and request.headers.get(
            "access-control-request-method"
        ):
            response: Response = Response(status_code=HTTP_204_NO_CONTENT)
            response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
            response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        else:
            response = await call_next(request)
        response.headers.setdefault("Vary", "Origin")
        if origin:
            response.headers.setdefault("Access-Control-Allow-Origin", origin)
            response.headers.setdefault("Access-Control-Max-Age", str(self.max_age))
        return response
