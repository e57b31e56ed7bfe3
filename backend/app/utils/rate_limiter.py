"""
Fixed-window, in-memory rate limiter used as a FastAPI dependency.
Counters are per process; a multi-worker deployment limits per worker.
"""
import logging
import threading
import time
from typing import Dict, Tuple

from fastapi import Request, HTTPException

logger = logging.getLogger(__name__)

# {(scope, ip): (window_start, count)}
_rate_limit_store: Dict[Tuple[str, str], Tuple[float, int]] = {}
_lock = threading.Lock()


def reset_rate_limits() -> None:
    """Clear all counters."""
    with _lock:
        _rate_limit_store.clear()


def rate_limit(requests: int, window: int, scope: str = "default"):
    """
    Dependency factory for rate limiting by client IP.
    Example: Depends(rate_limit(requests=5, window=60, scope="renewal-initiate"))
    """
    def limiter(request: Request):
        ip = request.client.host if request.client else "unknown"
        key = (scope, ip)
        now = time.time()

        with _lock:
            window_start, count = _rate_limit_store.get(key, (now, 0))

            # Reset window if expired
            if now - window_start > window:
                window_start, count = now, 0

            if count >= requests:
                retry_in = int(window - (now - window_start))
                logger.warning("Rate limit hit for %s on %s", ip, scope)
                raise HTTPException(
                    status_code=429,
                    detail=f"Rate limit exceeded. Try again in {retry_in} seconds.",
                )

            _rate_limit_store[key] = (window_start, count + 1)
        return True

    return limiter
