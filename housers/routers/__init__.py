"""Aggregate router exports."""
from .auth import router as auth_router
from .feed import router as feed_router
from .mentions import router as mentions_router
from .notifications import router as notifications_router
from .profiles import router as profiles_router

__all__ = [
    "auth_router",
    "feed_router",
    "mentions_router",
    "notifications_router",
    "profiles_router",
]
