"""Per-client rate limiting shared by all routers."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from locatemycity.config import settings

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])


def rate_limit() -> str:
    """Route limit, read per request so a changed setting applies at once."""
    return settings.rate_limit
