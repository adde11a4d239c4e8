"""
HTTP middleware shared by all routers.
"""

from typing import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, Response

from openphone_mcp.shared.logging import correlation_id_var

CORRELATION_HEADER = "X-Request-ID"


async def correlation_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a correlation id to the request's log records and echo it back."""
    correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
    token = correlation_id_var.set(correlation_id)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response
