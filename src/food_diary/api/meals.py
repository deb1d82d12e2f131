"""Meal diary endpoints scoped to the authenticated user."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends

from food_diary.api.dependencies import get_container, require_user
from food_diary.api.schemas import MealCreateRequest, meal_to_dict
from food_diary.containers import AppContainer
from food_diary.domain.models import PublicUser

router = APIRouter(prefix="/meals", tags=["meals"])


@router.get("/{day}")
async def list_meals(
    day: date,
    user: PublicUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> list[dict[str, object]]:
    """Return the caller's meals for a day."""
    entries = container.meal_service.list_by_date(user.id, day)
    return [meal_to_dict(entry) for entry in entries]


@router.post("")
async def add_meal(
    body: MealCreateRequest,
    user: PublicUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    meal_id = container.meal_service.add_meal(user.id, body.to_draft())
    return {"id": str(meal_id), "message": "Meal added successfully"}


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: str,
    user: PublicUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Delete one of the caller's meals.

    Ids owned by other users, unknown ids and ids that are not UUIDs all
    report zero changes.
    """
    try:
        parsed_id = UUID(meal_id)
    except ValueError:
        return {"message": "Meal deleted", "changes": 0}
    changes = container.meal_service.delete_meal(user.id, parsed_id)
    return {"message": "Meal deleted", "changes": changes}
