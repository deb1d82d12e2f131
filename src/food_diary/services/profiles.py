"""Profile service with Mifflin-St Jeor calorie goals."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from food_diary.domain.errors import ValidationError
from food_diary.domain.profiles import ACTIVITY_LEVELS, Profile, ProfileUpdate
from food_diary.services.accounts import UserRepository

_GENDERS = {"male", "female"}


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the stored profile, if any."""

    def upsert_profile(self, profile: Profile) -> None:
        """Insert or replace the profile row for ``profile.user_id``."""


def compute_daily_kcal(profile: Profile) -> int:
    """Mifflin-St Jeor BMR scaled by the activity factor."""
    bmr = 10 * profile.weight + 6.25 * profile.height - 5 * profile.age
    bmr += 5 if profile.gender == "male" else -161
    return round(bmr * profile.activity_level)


@dataclass
class ProfileService:
    repository: ProfileRepository
    user_repository: UserRepository

    def get_profile(self, user_id: UUID) -> Profile:
        stored = self.repository.get_profile(user_id)
        if stored is not None:
            return stored
        default = Profile(user_id=user_id)
        return replace(default, daily_kcal_goal=compute_daily_kcal(default))

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> Profile:
        """Apply changes and keep the goal in sync unless it is user-overridden."""
        _validate(update)
        current = self.get_profile(user_id)
        changes = {
            name: value
            for name, value in (
                ("weight", update.weight),
                ("height", update.height),
                ("age", update.age),
                ("gender", update.gender),
                ("activity_level", update.activity_level),
                ("use_custom_goal", update.use_custom_goal),
            )
            if value is not None
        }
        profile = replace(current, **changes)
        if profile.use_custom_goal:
            if update.daily_kcal_goal is not None:
                profile = replace(profile, daily_kcal_goal=update.daily_kcal_goal)
        else:
            profile = replace(profile, daily_kcal_goal=compute_daily_kcal(profile))
        self.repository.upsert_profile(profile)
        if update.display_name and update.display_name.strip():
            self.user_repository.update_display_name(
                user_id, update.display_name.strip()
            )
        return profile


def _validate(update: ProfileUpdate) -> None:
    for name in ("weight", "height", "age", "daily_kcal_goal"):
        value = getattr(update, name)
        if value is not None and value <= 0:
            raise ValidationError(f"{name} must be positive")
    if update.gender is not None and update.gender not in _GENDERS:
        raise ValidationError("gender must be 'male' or 'female'")
    if update.activity_level is not None and update.activity_level not in ACTIVITY_LEVELS:
        raise ValidationError(
            "activity_level must be one of "
            + ", ".join(str(level) for level in ACTIVITY_LEVELS)
        )
