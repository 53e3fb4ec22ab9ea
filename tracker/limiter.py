from slowapi import Limiter
from slowapi.util import get_remote_address

from tracker.config import settings

# Shared between main.py (default limit via middleware) and the auth routes,
# which add a tighter per-route limit against credential stuffing.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
