"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from food_diary.adapters.supabase_errors import execute
from food_diary.domain.errors import StorageError
from food_diary.domain.meals import MealDraft, MealEntry, MealType
from food_diary.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, user_id, date, meal_type, name, brand, serving_size, calories, "
    "proteins, carbs, fats, image_url, created_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal entries."""

    client: Client

    def list_by_date(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return meals for a user and day, oldest first."""
        response = execute(
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .order("created_at", desc=False),
            "list meals",
        )
        return [_parse_meal(row) for row in response.data or []]

    def insert(self, user_id: UUID, draft: MealDraft, meal_type: MealType) -> UUID:
        """Insert a meal row and return its id."""
        response = execute(
            self.client.table("meals").insert(
                {
                    "user_id": str(user_id),
                    "date": draft.date.isoformat() if draft.date else None,
                    "meal_type": meal_type.value,
                    "name": draft.name,
                    "brand": draft.brand,
                    "serving_size": draft.serving_size_g,
                    "calories": draft.calories,
                    "proteins": draft.proteins_g,
                    "carbs": draft.carbs_g,
                    "fats": draft.fats_g,
                    "image_url": draft.image_url,
                }
            ),
            "create meal entry",
        )
        if not response.data:
            raise StorageError("Failed to create meal entry")
        return UUID(response.data[0]["id"])

    def delete(self, user_id: UUID, meal_id: UUID) -> int:
        """Delete a meal row scoped to its owner."""
        response = execute(
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id)),
            "delete meal",
        )
        return len(response.data or [])

    def search_by_name_or_brand(self, term: str, limit: int) -> list[MealEntry]:
        """Case-insensitive substring search over meal names and brands.

        PostgREST reads ``*`` in a pattern as a wildcard, so rows are checked
        again against the literal term.
        """
        pattern = f"%{_escape_like(term)}%"
        needle = term.lower()
        rows: list[dict[str, object]] = []
        for column in ("name", "brand"):
            response = execute(
                self.client.table("meals")
                .select(_MEAL_COLUMNS)
                .ilike(column, pattern)
                .order("created_at", desc=False)
                .limit(limit),
                "search meal history",
            )
            rows.extend(response.data or [])
        seen: set[str] = set()
        meals: list[MealEntry] = []
        for row in rows:
            if str(row["id"]) in seen or not _contains(row, needle):
                continue
            seen.add(str(row["id"]))
            meals.append(_parse_meal(row))
        return meals[:limit]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(row: dict[str, object], needle: str) -> bool:
    return any(
        needle in str(row.get(column) or "").lower() for column in ("name", "brand")
    )


def _parse_meal(row: dict[str, object]) -> MealEntry:
    created_at = row.get("created_at")
    serving_size = row.get("serving_size")
    return MealEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=date.fromisoformat(str(row["date"])),
        meal_type=MealType(str(row["meal_type"])),
        name=str(row.get("name", "")),
        brand=row.get("brand") or None,
        serving_size_g=float(serving_size) if serving_size is not None else None,
        calories=float(row.get("calories") or 0.0),
        proteins_g=float(row.get("proteins") or 0.0),
        carbs_g=float(row.get("carbs") or 0.0),
        fats_g=float(row.get("fats") or 0.0),
        image_url=row.get("image_url") or None,
        created_at=datetime.fromisoformat(str(created_at)) if created_at else None,
    )
