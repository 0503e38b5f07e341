"""
FastAPI middleware for metrics collection.
"""
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from ..obs.obs import get_trace_id, record_request


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect request metrics and set trace IDs."""

    async def dispatch(self, request: Request, call_next):
        trace_id = get_trace_id(request)
        request.state.trace_id = trace_id

        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        # Use the route template so /stations/1 and /stations/2 share a bucket
        route_obj = request.scope.get("route")
        path = getattr(route_obj, "path", request.url.path)
        record_request(f"{request.method} {path}", duration_ms, response.status_code)

        response.headers["X-Trace-Id"] = trace_id
        return response
