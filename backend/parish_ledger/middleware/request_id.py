# backend/parish_ledger/middleware/request_id.py
from __future__ import annotations

import re
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# ids end up in every log line and in a response header: keep them short and printable
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def new_request_id() -> str:
    return uuid.uuid4().hex


def accept_request_id(raw: Optional[str]) -> str:
    """Caller-supplied id if it is safe to log and echo, otherwise a fresh one."""
    candidate = (raw or "").strip()
    if candidate and _SAFE_ID.match(candidate):
        return candidate
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id so the dues log lines of one call can be joined.
    The id is bound to a ContextVar for the JSON formatter, stored on
    request.state for the access-log middleware, and echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
