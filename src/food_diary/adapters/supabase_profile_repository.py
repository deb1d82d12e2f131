"""Supabase repository for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from food_diary.adapters.supabase_errors import execute
from food_diary.domain.profiles import Profile
from food_diary.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile row for a user, if present."""
        response = execute(
            self.client.table("profiles")
            .select(
                "user_id, weight, height, age, gender, activity_level, "
                "daily_kcal_goal, use_custom_goal"
            )
            .eq("user_id", str(user_id))
            .limit(1),
            "load profile",
        )
        if not response.data:
            return None
        row = response.data[0]
        defaults = Profile(user_id=user_id)
        return Profile(
            user_id=UUID(str(row["user_id"])),
            weight=float(row.get("weight") or defaults.weight),
            height=float(row.get("height") or defaults.height),
            age=int(row.get("age") or defaults.age),
            gender=str(row.get("gender") or defaults.gender),
            activity_level=float(row.get("activity_level") or defaults.activity_level),
            daily_kcal_goal=int(row.get("daily_kcal_goal") or defaults.daily_kcal_goal),
            use_custom_goal=bool(row.get("use_custom_goal")),
        )

    def upsert_profile(self, profile: Profile) -> None:
        """Insert or replace the profile row."""
        execute(
            self.client.table("profiles").upsert(
                {
                    "user_id": str(profile.user_id),
                    "weight": profile.weight,
                    "height": profile.height,
                    "age": profile.age,
                    "gender": profile.gender,
                    "activity_level": profile.activity_level,
                    "daily_kcal_goal": profile.daily_kcal_goal,
                    "use_custom_goal": profile.use_custom_goal,
                },
                on_conflict="user_id",
            ),
            "save profile",
        )
