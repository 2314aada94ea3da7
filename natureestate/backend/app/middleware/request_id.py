# backend/app/middleware/request_id.py
from __future__ import annotations

import re
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# ids are echoed into headers and log lines
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def accepted_request_id(raw: Optional[str]) -> Optional[str]:
    """Caller-supplied id if it is short and header-safe, else None."""
    if raw and _SAFE_ID.match(raw.strip()):
        return raw.strip()
    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id, echoed back as X-Request-ID.

    A well-formed incoming X-Request-ID is kept so a client can correlate its
    own logs; anything else is replaced with a fresh UUID4. The id is held in
    a ContextVar for the JSON log formatter and on request.state for the
    error handlers, which can run after the ContextVar has been reset.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = accepted_request_id(request.headers.get(REQUEST_ID_HEADER)) or str(uuid.uuid4())
        request.state.request_id = rid

        token = request_id_ctx.set(rid)
        try:
            resp = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        resp.headers[REQUEST_ID_HEADER] = rid
        return resp
