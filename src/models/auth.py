"""Models backing signup, login, email verification and password reset."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import EmailStr, Field

from src.models.base import PortalModel, StoredModel
from src.models.supplier import UserView


class TokenPurpose(str, Enum):
    VERIFY_EMAIL = "verify_email"
    RESET_PASSWORD = "reset_password"


class VerificationToken(StoredModel):
    """One-time token mailed to ``identifier``. The token string is the id."""

    collection: ClassVar[str] = "verification_tokens"

    identifier: str
    purpose: TokenPurpose
    expires_at: datetime


class Session(StoredModel):
    """Opaque bearer session. The token string is the id."""

    collection: ClassVar[str] = "sessions"

    user_id: str
    expires_at: datetime


class SignupRequest(PortalModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str


class SignupResponse(PortalModel):
    message: str
    supplier_id: str


class LoginRequest(PortalModel):
    email: EmailStr
    password: str


class LoginResponse(PortalModel):
    token: str
    expires_at: datetime
    user: UserView


class VerifyResponse(PortalModel):
    success: bool = True
    message: str
    user: UserView


class ForgotPasswordRequest(PortalModel):
    email: EmailStr


class ResendVerificationRequest(PortalModel):
    email: EmailStr


class ResetPasswordRequest(PortalModel):
    token: str = Field(..., min_length=1)
    password: str


class ResetTokenStatus(PortalModel):
    valid: bool
    message: str
    email: str


class MessageResponse(PortalModel):
    success: bool = True
    message: str
