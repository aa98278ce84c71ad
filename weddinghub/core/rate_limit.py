from slowapi import Limiter
from slowapi.util import get_remote_address
from weddinghub.core.config import settings

# Shared by every router so limits are tracked in one place
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
