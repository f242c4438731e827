"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in api/main.py (to mount as middleware) and in
api/routes/v1/auth.py (to apply the login limit with @limiter.limit()).

A single shared instance means every app built by create_app() shares one
in-memory counter store. Tests call limiter.reset() between cases.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Moving window: a burst cannot straddle a fixed minute boundary to double up.
limiter = Limiter(key_func=get_remote_address, storage_uri="memory://", strategy="moving-window")
