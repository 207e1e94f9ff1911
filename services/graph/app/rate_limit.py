"""
Global slowapi rate limiter.

Imported by social_graph/router.py for per-endpoint limits. Mounted onto
app.state in main.py so slowapi middleware can find it.

Storage: whatever RATELIMIT_STORAGE_URI points at (e.g. redis://...); in-memory
when unset, which is per-process and fine for local dev and tests.
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URI", "memory://"),
)
