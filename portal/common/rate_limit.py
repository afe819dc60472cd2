"""Rate limiting configuration using slowapi.

Provides a module-level Limiter instance imported by the auth router to
throttle login attempts per client IP, and wired into the app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Routes opt in with @limiter.limit("N/period"); nothing else is throttled.
limiter = Limiter(key_func=get_remote_address)
