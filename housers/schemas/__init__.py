"""Convenience exports for schema layer."""
from .auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    TermsAcceptanceRequest,
    TermsAcceptanceResponse,
)
from .feed import DiscoverResponse, PriceRangeResponse
from .mentions import (
    MentionActivationResponse,
    MentionRenderRequest,
    MentionRenderResponse,
    MentionSegmentResponse,
)
from .notifications import (
    Notification,
    NotificationKind,
    NotificationListResponse,
    NotificationResponse,
    NotificationSummaryResponse,
)
from .profiles import AvatarResponse, Profile, TierProgressResponse

__all__ = [
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "TermsAcceptanceRequest",
    "TermsAcceptanceResponse",
    "MessageResponse",
    "DiscoverResponse",
    "PriceRangeResponse",
    "MentionActivationResponse",
    "MentionRenderRequest",
    "MentionRenderResponse",
    "MentionSegmentResponse",
    "Notification",
    "NotificationKind",
    "NotificationListResponse",
    "NotificationResponse",
    "NotificationSummaryResponse",
    "AvatarResponse",
    "Profile",
    "TierProgressResponse",
]
