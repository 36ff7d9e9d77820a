"""Rate limiting via slowapi.

Module-level Limiter shared by routers (``@limiter.limit(...)``) and wired
into the FastAPI app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# 120 requests/minute per client IP; the notification badge polls every minute.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["120/minute"],
)
