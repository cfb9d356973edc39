"""Request id propagation for logs and error bodies."""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Read by the log filter and by error envelopes
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def incoming_request_id(request: Request) -> str:
    """Return the caller's ``X-Request-ID`` if sane, else a fresh uuid4."""

    candidate = request.headers.get("X-Request-ID", "")
    return candidate if _VALID_ID.match(candidate) else str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Ensure every request carries a request id."""

    async def dispatch(self, request: Request, call_next):
        # an outer LoggingMiddleware may already have assigned one
        req_id = getattr(request.state, "request_id", None) or incoming_request_id(request)
        token = request_id_ctx.set(req_id)
        request.state.request_id = req_id
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id
        return response
