import time
import uuid
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from perplexity_proxy.shared.config import logger

class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every call with an X-Request-ID, reusing the caller's when it sends one.
    """
    async def dispatch(
        self, request: Request, call_next
    ) -> Response:
        request.state.request_id = request.headers.get('X-Request-ID', str(uuid.uuid4()))
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response

async def add_process_time_header(
    request: Request, call_next
) -> Response:
    """
    Times the call, and logs it with the proxy outcome (error kind, success,
    preflight) when the chat handler recorded one.
    """
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"

    if "date" in response.headers:
        del response.headers["date"]

    outcome = getattr(request.state, "outcome", None)
    logger.info(
        "%s %s -> %s%s in %.4fs",
        request.method,
        request.url.path,
        response.status_code,
        f" ({outcome})" if outcome else "",
        process_time,
        extra={
            "req_id": getattr(request.state, 'request_id', 'N/A'),
            "outcome": outcome,
            "client_origin": request.headers.get("Origin"),
        }
    )
    return response
