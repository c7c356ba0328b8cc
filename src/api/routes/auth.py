"""Signup, email verification, sessions and password reset."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import AuthServiceDependency, CurrentUser, get_bearer_token
from src.models.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResendVerificationRequest,
    ResetPasswordRequest,
    ResetTokenStatus,
    SignupRequest,
    SignupResponse,
    VerifyResponse,
)
from src.models.supplier import UserView

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new supplier account",
)
async def signup(payload: SignupRequest, auth: AuthServiceDependency) -> SignupResponse:
    supplier = await auth.signup(payload.name, payload.email, payload.password)
    return SignupResponse(
        message="Account created. Please check your email to verify your account.",
        supplier_id=supplier.id,
    )


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    payload: ResendVerificationRequest, auth: AuthServiceDependency
) -> MessageResponse:
    await auth.resend_verification(payload.email)
    return MessageResponse(message="Verification email sent")


@router.get("/verify", response_model=VerifyResponse)
async def verify_email(
    auth: AuthServiceDependency, token: Annotated[str, Query()] = ""
) -> VerifyResponse:
    user = await auth.verify_email(token)
    return VerifyResponse(
        message="Email verified successfully", user=UserView.from_user(user)
    )


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, auth: AuthServiceDependency) -> LoginResponse:
    session, user = await auth.login(payload.email, payload.password)
    return LoginResponse(
        token=session.id,
        expires_at=session.expires_at,
        user=UserView.from_user(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    auth: AuthServiceDependency,
    token: Annotated[str | None, Depends(get_bearer_token)],
) -> MessageResponse:
    if token:
        await auth.logout(token)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserView)
async def me(user: CurrentUser) -> UserView:
    return UserView.from_user(user)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest, auth: AuthServiceDependency
) -> MessageResponse:
    await auth.forgot_password(payload.email)
    return MessageResponse(message="Password reset email sent successfully")


@router.get("/reset-password", response_model=ResetTokenStatus)
async def check_reset_token(
    auth: AuthServiceDependency, token: Annotated[str, Query()] = ""
) -> ResetTokenStatus:
    email = await auth.check_reset_token(token)
    return ResetTokenStatus(valid=True, message="Token is valid", email=email)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest, auth: AuthServiceDependency
) -> MessageResponse:
    await auth.reset_password(payload.token, payload.password)
    return MessageResponse(message="Password has been reset successfully")
