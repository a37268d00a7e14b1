"""Schemas for account flows (password reset, terms acceptance)."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ForgotPasswordRequest(BaseModel):
    email: str = Field(default="", max_length=320)


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(default="", max_length=256)
    confirm_password: str = Field(default="", max_length=256)


class TermsAcceptanceRequest(BaseModel):
    accepted: bool = False


class TermsAcceptanceResponse(BaseModel):
    accepted_terms_version: str


class MessageResponse(BaseModel):
    message: str


__all__ = [
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "TermsAcceptanceRequest",
    "TermsAcceptanceResponse",
    "MessageResponse",
]
