"""Shared slowapi rate limiter; SlowAPIMiddleware applies the default limits to every route."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[
        f"{settings.RATE_LIMIT_REQUESTS_PER_MINUTE}/minute",
        f"{settings.RATE_LIMIT_BURST}/second",
    ],
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)
