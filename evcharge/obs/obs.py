"""
In-process request metrics and trace ids.
"""
import uuid
import logging
from typing import Dict, Any
from fastapi import Request
from collections import defaultdict
from threading import Lock

logger = logging.getLogger(__name__)

# Keep only the most recent latencies per route
MAX_SAMPLES_PER_ROUTE = 1000

_metrics_lock = Lock()
_api_requests_total = defaultdict(int)
_api_errors_total = defaultdict(int)
_api_request_ms = defaultdict(list)


def get_trace_id(request: Request) -> str:
    """Get trace ID from request header or generate new one."""
    return request.headers.get("X-Trace-Id") or str(uuid.uuid4())


def record_request(route: str, duration_ms: float, status_code: int) -> None:
    with _metrics_lock:
        _api_requests_total[route] += 1
        if status_code >= 500:
            _api_errors_total[route] += 1
        _api_request_ms[route].append(duration_ms)
        if len(_api_request_ms[route]) > MAX_SAMPLES_PER_ROUTE:
            _api_request_ms[route] = _api_request_ms[route][-MAX_SAMPLES_PER_ROUTE:]


def get_metrics() -> Dict[str, Any]:
    """Get current metrics snapshot."""
    with _metrics_lock:
        return {
            "api_requests_total": dict(_api_requests_total),
            "api_errors_total": dict(_api_errors_total),
            "api_request_ms": {
                route: {
                    "count": len(times),
                    "avg_ms": sum(times) / len(times) if times else 0,
                    "p95_ms": sorted(times)[int(len(times) * 0.95)] if times else 0,
                }
                for route, times in _api_request_ms.items()
            },
        }


def clear_metrics() -> None:
    """Clear all metrics (useful for testing)."""
    with _metrics_lock:
        _api_requests_total.clear()
        _api_errors_total.clear()
        _api_request_ms.clear()
