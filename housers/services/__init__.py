"""Convenience exports for service layer."""
from .auth_service import (
    accept_terms,
    get_access_token,
    get_current_user_id,
    get_user_backend_client,
    requires_terms_acceptance,
    reset_password,
    send_password_reset,
    validate_email,
    validate_new_password,
)
from .avatar_service import Color, avatar_initial, colors_for
from .discover_service import DiscoverMoreSession, DiscoverResult, DiscoverStatus, primary_user_type
from .events import EventBus, UnreadCountStale, event_bus
from .mention_service import MentionResolver, MentionSegment, MentionToken, extract_usernames, segment_text
from .notification_service import (
    NotificationSyncEngine,
    SyncState,
    UnreadBadge,
    keep_optimistic_state,
    style_for,
    time_ago,
)
from .price_range import PriceRange, format_price, position_to_price, price_to_position
from .session_service import SessionRegistry, UserSession, build_user_session, get_session_registry
from .tier_service import UserTier, points_to_next, tier_for_points, tier_progress

__all__ = [
    "accept_terms",
    "get_access_token",
    "get_current_user_id",
    "get_user_backend_client",
    "requires_terms_acceptance",
    "reset_password",
    "send_password_reset",
    "validate_email",
    "validate_new_password",
    "Color",
    "avatar_initial",
    "colors_for",
    "DiscoverMoreSession",
    "DiscoverResult",
    "DiscoverStatus",
    "primary_user_type",
    "EventBus",
    "UnreadCountStale",
    "event_bus",
    "MentionResolver",
    "MentionSegment",
    "MentionToken",
    "extract_usernames",
    "segment_text",
    "NotificationSyncEngine",
    "SyncState",
    "UnreadBadge",
    "keep_optimistic_state",
    "style_for",
    "time_ago",
    "PriceRange",
    "format_price",
    "position_to_price",
    "price_to_position",
    "SessionRegistry",
    "UserSession",
    "build_user_session",
    "get_session_registry",
    "UserTier",
    "points_to_next",
    "tier_for_points",
    "tier_progress",
]
