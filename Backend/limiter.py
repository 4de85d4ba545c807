"""
Rate limiter configuration using SlowAPI.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from config import get_settings

# Keyed by client IP address; switched off with LEADERBOARD_RATE_LIMIT_ENABLED=false
limiter = Limiter(key_func=get_remote_address, enabled=get_settings().rate_limit_enabled)

READ_LIMIT = "60/minute"
WRITE_LIMIT = "10/minute"
