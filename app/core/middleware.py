"""Request correlation middleware."""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import get_logger, request_id_ctx

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to every log line and time each request.

    A client-supplied ``X-Request-ID`` is reused, otherwise a UUID4 is
    generated. The ID is echoed on the response, including CSV downloads.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        start = time.perf_counter()
        log = logger.bind(method=request.method, path=request.url.path)

        try:
            log.info("http.request_started", query=request.url.query or None)
            try:
                response = await call_next(request)
            except Exception:
                log.error("http.request_failed", duration_ms=_elapsed_ms(start), exc_info=True)
                raise

            log.info(
                "http.request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_ctx.reset(token)
