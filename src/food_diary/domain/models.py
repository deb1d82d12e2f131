"""Domain models for user accounts."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    email: str
    password_hash: str
    display_name: str
    is_verified: bool
    verification_token: str | None = None
    reset_token: str | None = None
    reset_token_expiry: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PublicUser:
    """Identity triple carried in session tokens."""

    id: UUID
    email: str
    name: str

    def as_dict(self) -> dict[str, str]:
        return {"id": str(self.id), "email": self.email, "name": self.name}


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser
