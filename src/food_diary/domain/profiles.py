"""Domain models for user profiles."""

from dataclasses import dataclass
from uuid import UUID

ACTIVITY_LEVELS = (1.2, 1.375, 1.55, 1.725, 1.9)


@dataclass(frozen=True)
class Profile:
    """Body metrics and calorie goal for a user."""

    user_id: UUID
    weight: float = 70.0
    height: float = 170.0
    age: int = 30
    gender: str = "male"
    activity_level: float = 1.2
    daily_kcal_goal: int = 2000
    use_custom_goal: bool = False


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile changes; unset fields keep their current value."""

    weight: float | None = None
    height: float | None = None
    age: int | None = None
    gender: str | None = None
    activity_level: float | None = None
    daily_kcal_goal: int | None = None
    use_custom_goal: bool | None = None
    display_name: str | None = None
