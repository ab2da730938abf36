"""
AuthGate Backend — Request ID Middleware
=========================================

What:  Assigns a correlation ID to every request and returns it as X-Request-ID.
Why:   Error bodies include the ID, so a client-reported failure can be matched
       to the server-side log line that holds the full detail.
How:   Reuses a client-supplied X-Request-ID when it looks sane, otherwise
       generates a short UUID; stores it in a ContextVar for loggers and
       exception handlers, and on request.state for route handlers.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own value.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client IDs are echoed into logs and headers; keep them short and printable.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var for the duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get("X-Request-ID", "")
        rid = incoming if _VALID_REQUEST_ID.match(incoming) else str(uuid.uuid4())[:8]

        # Not reset afterwards: the catch-all 500 handler runs outside this
        # middleware and still needs the ID. Each request has its own context.
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
