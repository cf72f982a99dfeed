from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Disabled under tests so repeated sync-all calls are not throttled
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.environment != "testing",
)
