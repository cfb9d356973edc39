"""Access log for the ordering API.

Each request yields an inbound line (query and JSON body, contact fields
masked) and an outbound line (status, latency, cache result). Successful
reads are sampled through ``LOG_SAMPLE_2XX`` since the staff dashboard polls
every few seconds; writes and failures are always logged.
"""

import json
import logging
import os
import random
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..utils.clock import now_iso
from ..utils.responses import err
from .request_id import incoming_request_id, request_id_ctx

# Compared lower-cased against body and query keys
MASKED_FIELDS = {"customername", "email", "notification_email", "phone"}
LOG_SAMPLE_2XX = float(os.getenv("LOG_SAMPLE_2XX", "0.1"))
READ_METHODS = {"GET", "HEAD", "OPTIONS"}

logger = logging.getLogger("api")


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: "***" if str(k).lower() in MASKED_FIELDS else _mask(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_mask(v) for v in value]
    return value


def _sampled_out(method: str, status: int) -> bool:
    if method in READ_METHODS and 200 <= status < 300:
        return random.random() >= LOG_SAMPLE_2XX
    return False


async def _json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return "<unparsable>"


def _crash_response(req_id: str) -> tuple[Response, str]:
    error_id = str(uuid.uuid4())
    logger.exception(json.dumps({"req_id": req_id, "error_id": error_id}))
    return (
        JSONResponse(err("Internal Server Error", error_id=error_id), status_code=500),
        error_id,
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request twice and turn crashes into a 500 envelope."""

    async def dispatch(self, request: Request, call_next):
        req_id = getattr(request.state, "request_id", None)
        token = None
        if not req_id:
            req_id = incoming_request_id(request)
            request.state.request_id = req_id
            token = request_id_ctx.set(req_id)

        inbound = {
            "ts": now_iso(),
            "req_id": req_id,
            "method": request.method,
            "path": request.url.path,
            "ip": request.client.host if request.client else None,
            "ua": request.headers.get("user-agent"),
        }
        if request.query_params:
            inbound["query"] = _mask(dict(request.query_params))
        body = await _json_body(request)
        if body is not None:
            inbound["body"] = _mask(body)

        started = time.perf_counter()
        error_id = None
        try:
            response = await call_next(request)
        except Exception:
            response, error_id = _crash_response(req_id)

        outbound = {
            "ts": now_iso(),
            "req_id": req_id,
            "route": request.url.path,
            "status": response.status_code,
            "latency_ms": int((time.perf_counter() - started) * 1000),
        }
        if error_id:
            outbound["error_id"] = error_id
        if response.headers.get("X-Cache"):
            outbound["cache"] = response.headers["X-Cache"]

        if not _sampled_out(request.method, response.status_code):
            logger.info(json.dumps(inbound))
            if response.status_code >= 500:
                logger.error(json.dumps(outbound))
            else:
                logger.info(json.dumps(outbound))

        response.headers["X-Request-ID"] = req_id
        if token is not None:
            request_id_ctx.reset(token)
        return response
