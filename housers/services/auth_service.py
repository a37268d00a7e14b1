"""Account flows delegated to the backend auth API: session lookup, password reset, terms."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..clients.backend import BackendClient
from ..config import get_settings
from ..constants import CURRENT_TERMS_VERSION, MIN_PASSWORD_LENGTH
from ..errors import NetworkError, ValidationError
from ..schemas import Profile

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)

RESET_EMAIL_FAILED = "Failed to send reset email. Please try again."
RESET_PASSWORD_FAILED = "Failed to reset password. Please try again."
TERMS_FAILED = "Failed to save your acceptance. Please try again."


class PasswordAuthClient(Protocol):
    async def recover_password(self, email: str, *, redirect_to: str) -> None:
        ...

    async def update_password(self, password: str) -> None:
        ...


class ProfileWriter(Protocol):
    async def update_profile(self, user_id: UUID, values: Mapping[str, Any]) -> None:
        ...


def validate_email(email: str) -> str:
    """Return the trimmed address or raise ``ValidationError``."""

    value = (email or "").strip()
    if not value:
        raise ValidationError("Please enter your email address", field="email")
    if "@" not in value or "." not in value:
        raise ValidationError("Please enter a valid email address", field="email")
    return value


def validate_new_password(new_password: str, confirm_password: str) -> str:
    if not new_password or not confirm_password:
        raise ValidationError("Please fill in all fields", field="new_password")
    if new_password != confirm_password:
        raise ValidationError("Passwords do not match", field="confirm_password")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="new_password",
        )
    return new_password


async def send_password_reset(client: PasswordAuthClient, email: str, *, redirect_to: str | None = None) -> None:
    """Ask the backend to email a reset link; the link opens the app's reset screen."""

    address = validate_email(email)
    target = redirect_to or get_settings().password_reset_redirect
    await client.recover_password(address, redirect_to=target)
    logger.info("Password reset email requested")


async def reset_password(client: PasswordAuthClient, new_password: str, confirm_password: str) -> None:
    password = validate_new_password(new_password, confirm_password)
    await client.update_password(password)
    logger.info("Password updated through reset flow")


def requires_terms_acceptance(profile: Profile | None) -> bool:
    if profile is None:
        return True
    return profile.accepted_terms_version != CURRENT_TERMS_VERSION


async def accept_terms(profiles: ProfileWriter, user_id: UUID, *, accepted: bool) -> str:
    """Record acceptance of the current terms on the user's profile."""

    if not accepted:
        raise ValidationError("Please accept the Terms of Service to continue", field="accepted")
    await profiles.update_profile(
        user_id,
        {
            "accepted_terms_version": CURRENT_TERMS_VERSION,
            "terms_accepted_at": datetime.now(timezone.utc).isoformat(),
        },
    )
    logger.info("Terms accepted | user_id=%s version=%s", user_id, CURRENT_TERMS_VERSION)
    return CURRENT_TERMS_VERSION


def get_access_token(credentials: HTTPAuthorizationCredentials | None = Depends(_security)) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return credentials.credentials


async def resolve_user_id(token: str) -> UUID:
    """Look up the session owner for ``token`` through the backend auth API."""

    try:
        async with BackendClient(access_token=token) as client:
            return await client.current_user_id()
    except NetworkError as exc:
        if exc.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session") from exc
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Authentication unavailable") from exc


async def get_current_user_id(token: str = Depends(get_access_token)) -> UUID:
    return await resolve_user_id(token)


async def get_user_backend_client(token: str = Depends(get_access_token)):
    """Yield a backend client acting as the signed-in user."""

    client = BackendClient(access_token=token)
    try:
        yield client
    finally:
        await client.aclose()


__all__ = [
    "RESET_EMAIL_FAILED",
    "RESET_PASSWORD_FAILED",
    "TERMS_FAILED",
    "validate_email",
    "validate_new_password",
    "send_password_reset",
    "reset_password",
    "requires_terms_acceptance",
    "accept_terms",
    "get_access_token",
    "get_current_user_id",
    "get_user_backend_client",
    "resolve_user_id",
]
