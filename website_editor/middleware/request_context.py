"""Request context middleware: request id, timing, access log and rate limiting.

Everything happens in one ``dispatch`` pass. The token bucket itself is the
pure function ``check_rate_limit`` so it can be tested without HTTP.
"""

import logging
import threading
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..core.logging_config import request_id_var
from ..exceptions import ErrorCode

logger = logging.getLogger(__name__)


# {client_key: (available_tokens, last_refill)}
_rate_buckets: dict[str, tuple[float, float]] = {}
_rate_lock = threading.Lock()

_rate_call_count = 0
_EVICT_EVERY = 100
_EVICT_AGE = 120.0


def check_rate_limit(
    bucket: dict[str, tuple[float, float]],
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> tuple[bool, float]:
    """Take one token for *key* if available.

    Args:
        bucket: Per-key state, modified in place.
        key: Client identifier.
        max_per_minute: Bucket capacity and refill rate. ``<= 0`` disables limiting.
        now: Monotonic timestamp, injectable for tests.

    Returns:
        ``(allowed, retry_after)``; *retry_after* is seconds until a token frees up.
    """
    global _rate_call_count

    if max_per_minute <= 0:
        return True, 0.0

    if now is None:
        now = time.monotonic()

    # Bound memory when clients rotate addresses.
    _rate_call_count += 1
    if _rate_call_count % _EVICT_EVERY == 0:
        cutoff = now - _EVICT_AGE
        for stale_key in [k for k, (_, ts) in bucket.items() if ts < cutoff]:
            del bucket[stale_key]

    refill_per_second = max_per_minute / 60.0

    if key in bucket:
        tokens, last_refill = bucket[key]
        tokens = min(float(max_per_minute), tokens + (now - last_refill) * refill_per_second)
    else:
        tokens = float(max_per_minute)

    if tokens >= 1.0:
        bucket[key] = (tokens - 1.0, now)
        return True, 0.0

    bucket[key] = (tokens, now)
    return False, (1.0 - tokens) / refill_per_second


_EXEMPT_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})


def _client_key(request: Request) -> str:
    """First ``X-Forwarded-For`` hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id, throttles it and logs the outcome."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        token = request_id_var.set(rid)
        try:
            if request.url.path not in _EXEMPT_PATHS:
                key = _client_key(request)
                with _rate_lock:
                    allowed, retry_after = check_rate_limit(
                        _rate_buckets, key, settings.rate_limit_per_minute
                    )
                if not allowed:
                    retry_after = round(retry_after, 1)
                    logger.warning(
                        "Rate limit exceeded",
                        extra={"client": key, "path": request.url.path, "retry_after": retry_after},
                    )
                    return JSONResponse(
                        status_code=429,
                        content={
                            "error": ErrorCode.RATE_LIMITED.value,
                            "message": "Too many requests",
                            "details": {"retry_after": retry_after},
                        },
                        headers={"Retry-After": str(int(retry_after) + 1), "X-Request-ID": rid},
                    )

            start = time.monotonic()
            response = await call_next(request)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            response.headers["X-Request-ID"] = rid
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            logger.info(
                f"{request.method} {request.url.path} {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
            return response
        finally:
            request_id_var.reset(token)
