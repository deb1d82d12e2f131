"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from food_diary.adapters.supabase_errors import UNIQUE_VIOLATION, execute
from food_diary.domain.errors import DuplicateEmailError, StorageError
from food_diary.domain.models import UserRecord
from food_diary.services.accounts import UserRepository

_USER_COLUMNS = (
    "id, email, password_hash, display_name, is_verified, verification_token, "
    "reset_token, reset_token_expiry, created_at"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for a normalized email, if present."""
        response = execute(
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("email", email)
            .limit(1),
            "load user",
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user by id, if present."""
        response = execute(
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", str(user_id))
            .limit(1),
            "load user",
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def create_user(
        self,
        email: str,
        password_hash: str,
        display_name: str,
        verification_token: str,
    ) -> UserRecord:
        """Create a new unverified user row and return it.

        A unique violation on ``email`` means a concurrent signup got there first.
        """
        try:
            response = (
                self.client.table("users")
                .insert(
                    {
                        "email": email,
                        "password_hash": password_hash,
                        "display_name": display_name,
                        "is_verified": False,
                        "verification_token": verification_token,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateEmailError from exc
            raise StorageError(f"Failed to create user: {exc.message}") from exc
        if not response.data:
            raise StorageError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def mark_verified(self, user_id: UUID) -> None:
        """Flag the user as verified and drop the verification token."""
        execute(
            self.client.table("users")
            .update({"is_verified": True, "verification_token": None})
            .eq("id", str(user_id)),
            "verify user",
        )

    def set_reset_token(self, user_id: UUID, token: str, expires_at: datetime) -> None:
        """Store the latest reset token on the user row."""
        execute(
            self.client.table("users")
            .update(
                {"reset_token": token, "reset_token_expiry": expires_at.isoformat()}
            )
            .eq("id", str(user_id)),
            "store reset token",
        )

    def consume_reset_token(self, user_id: UUID, token: str, password_hash: str) -> int:
        """Update the password only while the reset token is still current."""
        response = execute(
            self.client.table("users")
            .update(
                {
                    "password_hash": password_hash,
                    "reset_token": None,
                    "reset_token_expiry": None,
                }
            )
            .eq("id", str(user_id))
            .eq("reset_token", token),
            "reset password",
        )
        return len(response.data or [])

    def update_display_name(self, user_id: UUID, display_name: str) -> None:
        """Change the display name for a user."""
        execute(
            self.client.table("users")
            .update({"display_name": display_name})
            .eq("id", str(user_id)),
            "update display name",
        )


def _parse_timestamp(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        email=str(row["email"]),
        password_hash=str(row.get("password_hash") or ""),
        display_name=str(row.get("display_name") or ""),
        is_verified=bool(row.get("is_verified")),
        verification_token=row.get("verification_token"),
        reset_token=row.get("reset_token"),
        reset_token_expiry=_parse_timestamp(row.get("reset_token_expiry")),
        created_at=_parse_timestamp(row.get("created_at")),
    )
