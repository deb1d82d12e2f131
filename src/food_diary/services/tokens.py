"""Signed, expiring tokens for sessions, email verification and password reset."""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import UUID

import jwt

from food_diary.domain.errors import InvalidOrExpiredTokenError
from food_diary.domain.models import PublicUser

_ALGORITHM = "HS256"
_RESERVED_CLAIMS = {"purpose", "jti", "iat", "exp"}

_logger = logging.getLogger(__name__)


class TokenPurpose(str, Enum):
    SESSION = "session"
    VERIFY = "verify"
    RESET = "reset"


@dataclass
class TokenService:
    """Issues and validates HS256 JWTs signed with an injected secret.

    Every token carries a ``purpose`` claim that must match on validation, and
    a random ``jti`` that keeps tokens for the same payload distinct.
    """

    secret: str
    session_ttl: timedelta = timedelta(days=7)
    verification_ttl: timedelta = timedelta(days=1)
    reset_ttl: timedelta = timedelta(hours=1)

    def issue(
        self, purpose: TokenPurpose, payload: dict[str, object], ttl: timedelta
    ) -> str:
        """Sign ``payload`` for ``purpose`` and return the encoded token."""
        now = datetime.now(tz=UTC)
        claims: dict[str, object] = {
            key: value for key, value in payload.items() if key not in _RESERVED_CLAIMS
        }
        claims.update(
            {
                "purpose": purpose.value,
                "jti": secrets.token_urlsafe(8),
                "iat": now,
                "exp": now + ttl,
            }
        )
        return jwt.encode(claims, self.secret, algorithm=_ALGORITHM)

    def validate(self, token: str, purpose: TokenPurpose) -> dict[str, object]:
        """Return the token payload or raise ``InvalidOrExpiredTokenError``."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[_ALGORITHM])
        except jwt.InvalidTokenError as exc:
            _logger.debug("Rejected %s token: %s", purpose.value, type(exc).__name__)
            raise InvalidOrExpiredTokenError from None
        if claims.get("purpose") != purpose.value:
            raise InvalidOrExpiredTokenError
        return {
            key: value for key, value in claims.items() if key not in _RESERVED_CLAIMS
        }

    def issue_session(self, user: PublicUser) -> str:
        return self.issue(TokenPurpose.SESSION, user.as_dict(), self.session_ttl)

    def issue_verification(self, email: str) -> str:
        return self.issue(TokenPurpose.VERIFY, {"email": email}, self.verification_ttl)

    def issue_reset(self, user_id: UUID) -> str:
        return self.issue(TokenPurpose.RESET, {"id": str(user_id)}, self.reset_ttl)

    def session_user(self, token: str) -> PublicUser:
        """Decode a session token into the caller's identity."""
        payload = self.validate(token, TokenPurpose.SESSION)
        try:
            return PublicUser(
                id=UUID(str(payload["id"])),
                email=str(payload["email"]),
                name=str(payload.get("name") or ""),
            )
        except (KeyError, ValueError):
            raise InvalidOrExpiredTokenError from None
