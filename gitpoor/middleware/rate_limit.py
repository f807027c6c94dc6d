"""
Rate Limiting
Keeps sync triggers from exhausting the caller's GitHub API quota (slowapi)

Each sync costs one activity call plus one call per commit and per compare
range, so the trigger has its own, tighter limit (settings.sync_rate_limit).
"""
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

logger = logging.getLogger(__name__)


def rate_limit_key_func(request: Request) -> str:
    """
    Rate limit key: the bearer token when present (one key per session),
    the client IP otherwise.
    """
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        token = authorization[7:]
        return f"token:{token[-16:]}"

    ip = get_remote_address(request)
    logger.debug(f"Rate limit key: ip={ip}")
    return f"ip:{ip}"


limiter = Limiter(
    key_func=rate_limit_key_func,
    default_limits=["100/minute"],
    storage_uri="memory://",  # In-memory storage (single instance)
)
