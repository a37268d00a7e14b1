"""Account routes: password reset and terms acceptance."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from ..clients.backend import BackendClient, get_backend_client
from ..errors import NetworkError, ValidationError
from ..schemas import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    TermsAcceptanceRequest,
    TermsAcceptanceResponse,
)
from ..services import (
    SessionRegistry,
    accept_terms,
    get_current_user_id,
    get_session_registry,
    get_user_backend_client,
    reset_password,
    send_password_reset,
)
from ..services.auth_service import RESET_EMAIL_FAILED, RESET_PASSWORD_FAILED, TERMS_FAILED

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _validation_error(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": exc.message, "field": exc.field},
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    client: BackendClient = Depends(get_backend_client),
) -> MessageResponse:
    try:
        await send_password_reset(client, payload.email)
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except NetworkError as exc:
        logger.error("Sending reset email failed | status=%s", exc.status_code)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail={"message": RESET_EMAIL_FAILED}) from exc
    return MessageResponse(message="Check your email for a link to reset your password.")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password_endpoint(
    payload: ResetPasswordRequest,
    client: BackendClient = Depends(get_user_backend_client),
) -> MessageResponse:
    try:
        await reset_password(client, payload.new_password, payload.confirm_password)
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except NetworkError as exc:
        logger.error("Resetting password failed | status=%s", exc.status_code)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail={"message": RESET_PASSWORD_FAILED}) from exc
    return MessageResponse(message="Your password has been updated.")


@router.post("/accept-terms", response_model=TermsAcceptanceResponse)
async def accept_terms_endpoint(
    payload: TermsAcceptanceRequest,
    user_id: UUID = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> TermsAcceptanceResponse:
    try:
        version = await accept_terms(registry.get(user_id).profiles, user_id, accepted=payload.accepted)
    except ValidationError as exc:
        raise _validation_error(exc) from exc
    except NetworkError as exc:
        logger.error("Recording terms acceptance failed | user_id=%s status=%s", user_id, exc.status_code)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail={"message": TERMS_FAILED}) from exc
    return TermsAcceptanceResponse(accepted_terms_version=version)
