"""Tests for the meal ledger."""

from datetime import date
from uuid import uuid4

import pytest

from food_diary.domain.errors import ValidationError
from food_diary.domain.meals import MealDraft, MealType
from food_diary.services.meals import MealService
from tests.conftest import InMemoryMealRepository

_DAY = date(2024, 5, 1)


def _draft(name: str = "Oatmeal", meal_type: str = "breakfast") -> MealDraft:
    return MealDraft(
        date=_DAY,
        meal_type=meal_type,
        name=name,
        serving_size_g=80,
        calories=300,
        proteins_g=10,
        carbs_g=54,
        fats_g=5,
    )


def test_add_and_list_in_insertion_order() -> None:
    service = MealService(InMemoryMealRepository())
    user_id = uuid4()

    service.add_meal(user_id, _draft("Oatmeal"))
    service.add_meal(user_id, _draft("Coffee", "snacks"))
    service.add_meal(uuid4(), _draft("Pizza", "dinner"))

    entries = service.list_by_date(user_id, _DAY)

    assert [entry.name for entry in entries] == ["Oatmeal", "Coffee"]
    assert entries[1].meal_type is MealType.SNACKS
    assert service.list_by_date(user_id, date(2024, 5, 2)) == []


@pytest.mark.parametrize(
    "draft",
    [
        MealDraft(meal_type="lunch", name="Soup"),
        MealDraft(date=_DAY, name="Soup"),
        MealDraft(date=_DAY, meal_type="lunch", name="  "),
        MealDraft(date=_DAY, meal_type="brunch", name="Soup"),
    ],
)
def test_add_meal_validates_required_fields(draft: MealDraft) -> None:
    service = MealService(InMemoryMealRepository())

    with pytest.raises(ValidationError):
        service.add_meal(uuid4(), draft)


def test_delete_is_scoped_to_owner() -> None:
    repository = InMemoryMealRepository()
    service = MealService(repository)
    owner, intruder = uuid4(), uuid4()
    meal_id = service.add_meal(owner, _draft())

    assert service.delete_meal(intruder, meal_id) == 0
    assert len(repository.meals) == 1
    assert service.delete_meal(owner, meal_id) == 1
    assert service.delete_meal(owner, meal_id) == 0
