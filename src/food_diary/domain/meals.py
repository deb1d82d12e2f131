"""Domain models for meal logging."""

import datetime
from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Slots a meal can be logged under."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


@dataclass(frozen=True)
class MealDraft:
    """Unvalidated meal data as submitted by a client."""

    date: datetime.date | None = None
    meal_type: str | None = None
    name: str | None = None
    brand: str | None = None
    serving_size_g: float | None = None
    calories: float | None = None
    proteins_g: float | None = None
    carbs_g: float | None = None
    fats_g: float | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class MealEntry:
    """A logged meal row."""

    id: UUID
    user_id: UUID
    date: datetime.date
    meal_type: MealType
    name: str
    brand: str | None
    serving_size_g: float | None
    calories: float
    proteins_g: float
    carbs_g: float
    fats_g: float
    image_url: str | None
    created_at: datetime.datetime | None = None
