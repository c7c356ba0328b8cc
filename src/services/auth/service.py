"""Credential auth: signup, email verification, sessions and password reset."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta

from src.config import settings
from src.errors import Forbidden, NotFound, Unauthorized, ValidationError
from src.models.auth import Session, TokenPurpose, VerificationToken
from src.models.base import utcnow
from src.models.supplier import Supplier, User, UserRole
from src.services.auth.email import EmailSender
from src.services.auth.passwords import hash_password, verify_password
from src.services.repository.base import Repository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str) -> None:
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
        )


class AuthService:
    def __init__(self, repository: Repository, email_sender: EmailSender) -> None:
        self._repository = repository
        self._email = email_sender

    async def find_user_by_email(self, email: str) -> User | None:
        email = normalize_email(email)
        return await self._repository.find_one(User, lambda u: u.email == email)

    async def signup(self, name: str, email: str, password: str) -> Supplier:
        """Create an unverified supplier login and mail its verification link."""

        validate_password(password)
        email = normalize_email(email)
        if await self.find_user_by_email(email) is not None:
            raise ValidationError("A supplier with this email already exists")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=await hash_password(password),
            role=UserRole.SUPPLIER,
        )
        supplier = Supplier(user_id=user.id, name=user.name, email=email)
        await self._repository.save(user)
        await self._repository.save(supplier)

        token = await self._issue_token(
            email,
            TokenPurpose.VERIFY_EMAIL,
            timedelta(hours=settings.VERIFICATION_TOKEN_TTL_HOURS),
        )
        try:
            await self._email.send_verification_email(email, token.id, user.name)
        except Exception as exc:
            # The account exists either way; the user can ask for a new link.
            logger.error("Verification email to %s failed: %s", email, exc)

        logger.info("Supplier signed up", extra={"supplier_id": supplier.id})
        return supplier

    async def resend_verification(self, email: str) -> None:
        user = await self.find_user_by_email(email)
        if user is None:
            raise NotFound("No account found with this email address")
        if user.email_verified:
            raise ValidationError("Email is already verified")
        token = await self._issue_token(
            user.email,
            TokenPurpose.VERIFY_EMAIL,
            timedelta(hours=settings.VERIFICATION_TOKEN_TTL_HOURS),
        )
        await self._email.send_verification_email(user.email, token.id, user.name)

    async def verify_email(self, token: str) -> User:
        record = await self._consume_token(
            token, TokenPurpose.VERIFY_EMAIL, "Invalid verification token"
        )
        user = await self.find_user_by_email(record.identifier)
        if user is None:
            raise NotFound("User not found")

        user.email_verified_at = utcnow()
        user.touch()
        await self._repository.save(user)

        supplier = await self._repository.find_one(
            Supplier, lambda s: s.user_id == user.id
        )
        if supplier is not None and not supplier.verified:
            supplier.verified = True
            supplier.touch()
            await self._repository.save(supplier)

        logger.info("Email verified for user %s", user.id)
        return user

    async def login(self, email: str, password: str) -> tuple[Session, User]:
        user = await self.find_user_by_email(email)
        if user is None or not await verify_password(password, user.password_hash):
            raise Unauthorized("Invalid email or password")
        if not user.email_verified:
            raise Forbidden("Please verify your email before logging in")

        session = Session(
            id=secrets.token_urlsafe(32),
            user_id=user.id,
            expires_at=utcnow() + timedelta(seconds=settings.SESSION_TTL_SECONDS),
        )
        await self._repository.save(session)
        logger.info("User %s logged in", user.id)
        return session, user

    async def logout(self, token: str) -> None:
        await self._repository.delete(Session, token)

    async def authenticate(self, token: str | None) -> User:
        """Resolve a bearer token to its user or raise Unauthorized."""

        if not token:
            raise Unauthorized()
        session = await self._repository.get(Session, token)
        if session is None:
            raise Unauthorized()
        if session.expires_at <= utcnow():
            await self._repository.delete(Session, token)
            raise Unauthorized("Session expired")
        user = await self._repository.get(User, session.user_id)
        if user is None:
            raise Unauthorized()
        return user

    async def forgot_password(self, email: str) -> None:
        user = await self.find_user_by_email(email)
        if user is None:
            raise NotFound("No account found with this email address")

        token = await self._issue_token(
            user.email,
            TokenPurpose.RESET_PASSWORD,
            timedelta(seconds=settings.RESET_TOKEN_TTL_SECONDS),
        )
        await self._email.send_password_reset_email(user.email, token.id, user.name)

    async def check_reset_token(self, token: str) -> str:
        """Return the email a valid reset token belongs to."""

        record = await self._valid_token(
            token, TokenPurpose.RESET_PASSWORD, "Invalid reset token"
        )
        if await self.find_user_by_email(record.identifier) is None:
            raise NotFound("User not found")
        return record.identifier

    async def reset_password(self, token: str, password: str) -> None:
        validate_password(password)
        record = await self._valid_token(
            token, TokenPurpose.RESET_PASSWORD, "Invalid reset token"
        )
        user = await self.find_user_by_email(record.identifier)
        if user is None:
            raise NotFound("User not found")

        user.password_hash = await hash_password(password)
        user.touch()
        await self._repository.save(user)
        await self._repository.delete(VerificationToken, record.id)
        await self._revoke_sessions(user.id)
        logger.info("Password reset for user %s", user.id)

    async def _issue_token(
        self, identifier: str, purpose: TokenPurpose, ttl: timedelta
    ) -> VerificationToken:
        token = VerificationToken(
            id=secrets.token_hex(32),
            identifier=identifier,
            purpose=purpose,
            expires_at=utcnow() + ttl,
        )
        await self._repository.save(token)
        return token

    async def _valid_token(
        self, token: str, purpose: TokenPurpose, invalid_message: str
    ) -> VerificationToken:
        if not token:
            raise ValidationError("Token is required")
        record = await self._repository.get(VerificationToken, token)
        if record is None or record.purpose != purpose:
            raise ValidationError(invalid_message)
        if record.expires_at < utcnow():
            await self._repository.delete(VerificationToken, token)
            if purpose == TokenPurpose.RESET_PASSWORD:
                raise ValidationError(
                    "Reset token has expired. Please request a new password reset."
                )
            raise ValidationError("Verification token has expired")
        return record

    async def _consume_token(
        self, token: str, purpose: TokenPurpose, invalid_message: str
    ) -> VerificationToken:
        record = await self._valid_token(token, purpose, invalid_message)
        await self._repository.delete(VerificationToken, record.id)
        return record

    async def _revoke_sessions(self, user_id: str) -> None:
        for session in await self._repository.find(
            Session, lambda s: s.user_id == user_id
        ):
            await self._repository.delete(Session, session.id)
