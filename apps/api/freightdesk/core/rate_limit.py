"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from starlette.requests import Request

from freightdesk.core.config import settings


def _get_real_client_ip(request: Request) -> str:
    """Extract the real client IP behind a reverse proxy."""
    return (
        request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "127.0.0.1")
    )


limiter = Limiter(key_func=_get_real_client_ip)

# Applied to the chat endpoint; every chat turn costs one or more LLM calls.
CHAT_RATE_LIMIT = settings.chat_rate_limit
