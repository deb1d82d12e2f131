"""Request and response bodies for the HTTP API."""

import datetime

from pydantic import BaseModel, ConfigDict, Field

from food_diary.domain.meals import MealDraft, MealEntry
from food_diary.domain.nutrition import FoodProduct
from food_diary.domain.profiles import Profile, ProfileUpdate


class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str | None = None
    new_password: str | None = Field(default=None, alias="newPassword")


class MealCreateRequest(BaseModel):
    """Meal fields as sent by the diary client; required ones are checked later."""

    date: datetime.date | None = None
    meal_type: str | None = None
    name: str | None = None
    brand: str | None = None
    serving_size: float | None = None
    calories: float | None = None
    proteins: float | None = None
    carbs: float | None = None
    fats: float | None = None
    image_url: str | None = None

    def to_draft(self) -> MealDraft:
        return MealDraft(
            date=self.date,
            meal_type=self.meal_type,
            name=self.name,
            brand=self.brand,
            serving_size_g=self.serving_size,
            calories=self.calories,
            proteins_g=self.proteins,
            carbs_g=self.carbs,
            fats_g=self.fats,
            image_url=self.image_url,
        )


class CacheWriteRequest(BaseModel):
    query: str | None = None
    results: list[FoodProduct] | None = None


class ProfileUpdateRequest(BaseModel):
    weight: float | None = None
    height: float | None = None
    age: int | None = None
    gender: str | None = None
    activity_level: float | None = None
    daily_kcal_goal: int | None = None
    use_custom_goal: bool | None = None
    name: str | None = None

    def to_update(self) -> ProfileUpdate:
        return ProfileUpdate(
            weight=self.weight,
            height=self.height,
            age=self.age,
            gender=self.gender,
            activity_level=self.activity_level,
            daily_kcal_goal=self.daily_kcal_goal,
            use_custom_goal=self.use_custom_goal,
            display_name=self.name,
        )


def meal_to_dict(entry: MealEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "date": entry.date.isoformat(),
        "meal_type": entry.meal_type.value,
        "name": entry.name,
        "brand": entry.brand,
        "serving_size": entry.serving_size_g,
        "calories": entry.calories,
        "proteins": entry.proteins_g,
        "carbs": entry.carbs_g,
        "fats": entry.fats_g,
        "image_url": entry.image_url,
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
    }


def profile_to_dict(profile: Profile) -> dict[str, object]:
    return {
        "weight": profile.weight,
        "height": profile.height,
        "age": profile.age,
        "gender": profile.gender,
        "activity_level": profile.activity_level,
        "daily_kcal_goal": profile.daily_kcal_goal,
        "use_custom_goal": profile.use_custom_goal,
    }
