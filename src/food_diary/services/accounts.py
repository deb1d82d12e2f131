"""Account lifecycle: signup, email verification, login and password reset."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from food_diary.domain.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotVerifiedError,
    ValidationError,
)
from food_diary.domain.models import LoginResult, PublicUser, UserRecord
from food_diary.services.notifications import NotificationService
from food_diary.services.passwords import PasswordHasher
from food_diary.services.tokens import TokenPurpose, TokenService

SIGNUP_MESSAGE = "Account created. Check your email to verify your address."
FORGOT_PASSWORD_MESSAGE = (
    "If an account exists for that email, a password reset link has been sent."
)
RESET_PASSWORD_MESSAGE = "Password updated. You can now log in."

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user credentials."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with the given normalized email, if present."""

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user by id, if present."""

    def create_user(
        self,
        email: str,
        password_hash: str,
        display_name: str,
        verification_token: str,
    ) -> UserRecord:
        """Insert an unverified user and return it."""

    def mark_verified(self, user_id: UUID) -> None:
        """Set is_verified and clear the verification token."""

    def set_reset_token(self, user_id: UUID, token: str, expires_at: datetime) -> None:
        """Store a reset token, replacing any previous one."""

    def consume_reset_token(self, user_id: UUID, token: str, password_hash: str) -> int:
        """Atomically set the password and clear the reset token.

        The update only applies while the stored reset token still equals
        ``token``; returns the number of rows changed.
        """

    def update_display_name(self, user_id: UUID, display_name: str) -> None:
        """Change the user's display name."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class AccountService:
    """Orchestrates the account state machine.

    Unregistered -> PendingVerification (signup) -> Verified (verify). A pending
    password reset overlays the verified state until the reset token is consumed
    or replaced by a newer request.
    """

    repository: UserRepository
    tokens: TokenService
    hasher: PasswordHasher
    notifications: NotificationService

    async def signup(self, email: str, password: str, name: str | None = None) -> str:
        """Register an unverified user and send the verification email."""
        normalized = normalize_email(email or "")
        if not normalized or not password:
            raise ValidationError("Email and password are required")
        if self.repository.get_by_email(normalized) is not None:
            raise DuplicateEmailError
        display_name = (name or "").strip() or normalized.split("@", 1)[0]

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        token = self.tokens.issue_verification(normalized)
        user = self.repository.create_user(
            email=normalized,
            password_hash=password_hash,
            display_name=display_name,
            verification_token=token,
        )
        _logger.info("User signed up: user_id=%s", user.id)
        self.notifications.send_verification(user.email, user.display_name, token)
        return SIGNUP_MESSAGE

    def verify(self, token: str) -> UserRecord:
        """Mark the account behind a verification token as verified."""
        payload = self.tokens.validate(token, TokenPurpose.VERIFY)
        email = normalize_email(str(payload.get("email", "")))
        user = self.repository.get_by_email(email)
        if user is None:
            raise InvalidOrExpiredTokenError
        if not user.is_verified:
            self.repository.mark_verified(user.id)
            _logger.info("User verified: user_id=%s", user.id)
        return user

    def login(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a session token."""
        user = self.repository.get_by_email(normalize_email(email or ""))
        if user is None or not self.hasher.verify(password or "", user.password_hash):
            raise InvalidCredentialsError
        if not user.is_verified:
            raise NotVerifiedError
        public = PublicUser(id=user.id, email=user.email, name=user.display_name)
        return LoginResult(token=self.tokens.issue_session(public), user=public)

    async def forgot_password(self, email: str) -> str:
        """Start a password reset; the reply never reveals whether the email exists."""
        user = self.repository.get_by_email(normalize_email(email or ""))
        if user is None:
            return FORGOT_PASSWORD_MESSAGE
        token = self.tokens.issue_reset(user.id)
        expires_at = datetime.now(tz=UTC) + self.tokens.reset_ttl
        self.repository.set_reset_token(user.id, token, expires_at)
        self.notifications.send_password_reset(user.email, token)
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str, new_password: str) -> str:
        """Consume a reset token and set a new password."""
        if not token or not new_password:
            raise ValidationError("Token and new password are required")
        payload = self.tokens.validate(token, TokenPurpose.RESET)
        try:
            user_id = UUID(str(payload.get("id")))
        except ValueError:
            raise InvalidOrExpiredTokenError from None
        user = self.repository.get_by_id(user_id)
        if user is None or user.reset_token != token:
            raise InvalidOrExpiredTokenError
        changed = self.repository.consume_reset_token(
            user.id, token, self.hasher.hash(new_password)
        )
        if changed == 0:
            raise InvalidOrExpiredTokenError
        _logger.info("Password reset: user_id=%s", user.id)
        return RESET_PASSWORD_MESSAGE
