"""
Simple in-memory sliding-window rate limiter for API endpoints.

Per-process only; a multi-instance deployment needs a shared store.
"""
import logging
import time
from collections import defaultdict
from typing import Dict, List
from fastapi import Request, HTTPException, status

from mockhire.core.config import LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS

logger = logging.getLogger(__name__)

# {scope:ip: [timestamps]}
rate_limit_store: Dict[str, List[float]] = defaultdict(list)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First IP in the proxy chain
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def check_rate_limit(request: Request, scope: str, max_requests: int, window_seconds: int) -> None:
    """
    Check if client has exceeded rate limit for a scope.

    Args:
        request: FastAPI request object
        scope: Name of the limited action, e.g. "login"
        max_requests: Maximum number of requests allowed
        window_seconds: Time window in seconds

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    key = f"{scope}:{get_client_ip(request)}"
    now = time.time()

    cutoff = now - window_seconds
    rate_limit_store[key] = [ts for ts in rate_limit_store[key] if ts > cutoff]

    request_count = len(rate_limit_store[key])
    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded: key={key} ({request_count} requests in {window_seconds}s)")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
        )

    rate_limit_store[key].append(now)


def rate_limited(scope: str, max_requests: int, window_seconds: int):
    """Dependency factory applying check_rate_limit to a route."""
    def dependency(request: Request) -> None:
        check_rate_limit(request, scope, max_requests, window_seconds)

    return dependency


login_rate_limit = rate_limited("login", LOGIN_RATE_LIMIT, LOGIN_RATE_WINDOW_SECONDS)


def reset_rate_limits() -> None:
    rate_limit_store.clear()
