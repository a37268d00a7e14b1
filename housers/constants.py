"""Project-wide constant values."""
from __future__ import annotations

CURRENT_TERMS_VERSION = "1.0.0"

REFRESH_NOTIFICATIONS_EVENT = "RefreshNotifications"  # name observed by badge subscribers

NOTIFICATION_PAGE_SIZE = 50

MIN_PASSWORD_LENGTH = 6

__all__ = [
    "CURRENT_TERMS_VERSION",
    "REFRESH_NOTIFICATIONS_EVENT",
    "NOTIFICATION_PAGE_SIZE",
    "MIN_PASSWORD_LENGTH",
]
