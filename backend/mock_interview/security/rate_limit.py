"""
Rate limiting for endpoints that trigger parsing or AI calls.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from mock_interview.core.config import (
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_UPLOADS,
    RATE_LIMIT_SESSIONS,
)


limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

# Re-exported so routers can decorate endpoints without importing config
UPLOAD_LIMIT = RATE_LIMIT_UPLOADS
SESSION_LIMIT = RATE_LIMIT_SESSIONS
