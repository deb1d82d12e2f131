"""Meal ledger service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from food_diary.domain.errors import ValidationError
from food_diary.domain.meals import MealDraft, MealEntry, MealType

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meal entries."""

    def list_by_date(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return a user's meals for a day in insertion order."""

    def insert(self, user_id: UUID, draft: MealDraft, meal_type: MealType) -> UUID:
        """Insert a validated meal and return its id."""

    def delete(self, user_id: UUID, meal_id: UUID) -> int:
        """Delete a meal owned by the user; return the number of rows removed."""

    def search_by_name_or_brand(self, term: str, limit: int) -> list[MealEntry]:
        """Return meals from any user whose name or brand contains ``term``."""


@dataclass
class MealService:
    """Per-user, per-day meal logging."""

    repository: MealRepository

    def list_by_date(self, user_id: UUID, day: date) -> list[MealEntry]:
        return self.repository.list_by_date(user_id, day)

    def add_meal(self, user_id: UUID, draft: MealDraft) -> UUID:
        """Validate and store a meal entry for the user."""
        missing = [
            label
            for label, value in (
                ("date", draft.date),
                ("meal_type", draft.meal_type),
                ("name", (draft.name or "").strip()),
            )
            if not value
        ]
        if missing:
            raise ValidationError(
                "Missing required fields: date, meal_type, and name are required"
            )
        try:
            meal_type = MealType(str(draft.meal_type).lower())
        except ValueError:
            raise ValidationError(
                f"meal_type must be one of: {', '.join(t.value for t in MealType)}"
            ) from None
        meal_id = self.repository.insert(user_id, draft, meal_type)
        _logger.info("Meal added: user_id=%s meal_id=%s", user_id, meal_id)
        return meal_id

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> int:
        """Delete a meal; unknown or foreign ids change nothing."""
        changes = self.repository.delete(user_id, meal_id)
        _logger.info(
            "Meal delete: user_id=%s meal_id=%s changes=%s", user_id, meal_id, changes
        )
        return changes

    def search_history(self, term: str, limit: int = 10) -> list[MealEntry]:
        """Return distinct (name, brand) meals matching ``term`` across all users."""
        seen: set[tuple[str, str]] = set()
        distinct: list[MealEntry] = []
        for entry in self.repository.search_by_name_or_brand(term, limit=limit * 10):
            key = (entry.name, entry.brand or "")
            if key in seen:
                continue
            seen.add(key)
            distinct.append(entry)
            if len(distinct) >= limit:
                break
        return distinct
