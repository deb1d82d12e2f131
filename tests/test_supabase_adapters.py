"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from food_diary.adapters.supabase_meal_repository import SupabaseMealRepository
from food_diary.adapters.supabase_profile_repository import SupabaseProfileRepository
from food_diary.adapters.supabase_search_cache_repository import (
    SupabaseSearchCacheRepository,
)
from food_diary.adapters.supabase_user_repository import SupabaseUserRepository
from food_diary.domain.errors import DuplicateEmailError, StorageError
from food_diary.domain.meals import MealDraft, MealType
from food_diary.domain.profiles import Profile
from tests.conftest import make_product


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_options: dict[str, object] = field(default_factory=dict)
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    ranges: list[tuple[int, int]] = field(default_factory=list)
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload, **options) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_options = options
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def like(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def range(self, start: int, end: int) -> "FakeTable":
        self.ranges.append((start, end))
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _user_row(user_id: str, **overrides) -> dict[str, object]:  # type: ignore[no-untyped-def]
    row: dict[str, object] = {
        "id": user_id,
        "email": "a@x.com",
        "password_hash": "pbkdf2_sha256$1000$c2FsdA==$ZGlnZXN0",
        "display_name": "Alice",
        "is_verified": False,
        "verification_token": "verify-token",
        "reset_token": None,
        "reset_token_expiry": None,
        "created_at": "2024-05-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_supabase_user_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = str(uuid4())
    users_table.queue("insert", [_user_row(user_id)])
    users_table.queue(
        "select",
        [
            _user_row(
                user_id,
                reset_token="reset-token",
                reset_token_expiry="2024-05-01T11:00:00+00:00",
            )
        ],
    )

    repository = SupabaseUserRepository(client)
    created = repository.create_user("a@x.com", "hash", "Alice", "verify-token")
    fetched = repository.get_by_email("a@x.com")

    assert str(created.id) == user_id
    assert created.is_verified is False
    assert fetched is not None
    assert fetched.reset_token_expiry == datetime(2024, 5, 1, 11, tzinfo=UTC)
    assert ("email", "a@x.com") in users_table.last_filters


def test_supabase_user_repository_missing_insert_raises() -> None:
    repository = SupabaseUserRepository(FakeSupabaseClient())

    with pytest.raises(StorageError):
        repository.create_user("a@x.com", "hash", "Alice", "verify-token")


def test_supabase_reset_token_consumption_is_conditional() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = uuid4()
    users_table.queue("update", [_user_row(str(user_id))])

    repository = SupabaseUserRepository(client)

    assert repository.consume_reset_token(user_id, "reset-token", "new-hash") == 1
    assert ("reset_token", "reset-token") in users_table.last_filters
    assert users_table.last_payload["reset_token"] is None  # type: ignore[index]
    assert repository.consume_reset_token(user_id, "reset-token", "new-hash") == 0


def _meal_row(meal_id: str, user_id: str, name: str, brand: str | None = None):  # type: ignore[no-untyped-def]
    return {
        "id": meal_id,
        "user_id": user_id,
        "date": "2024-05-01",
        "meal_type": "lunch",
        "name": name,
        "brand": brand,
        "serving_size": 150,
        "calories": 200,
        "proteins": 10,
        "carbs": 20,
        "fats": 5,
        "image_url": None,
        "created_at": "2024-05-01T12:00:00+00:00",
    }


def test_supabase_meal_repository() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    user_id = uuid4()
    meal_id = str(uuid4())
    meals_table.queue("insert", [{"id": meal_id}])
    meals_table.queue("select", [_meal_row(meal_id, str(user_id), "Pasta")])
    meals_table.queue("delete", [])

    repository = SupabaseMealRepository(client)
    created_id = repository.insert(
        user_id,
        MealDraft(date=date(2024, 5, 1), meal_type="lunch", name="Pasta"),
        MealType.LUNCH,
    )
    meals = repository.list_by_date(user_id, date(2024, 5, 1))

    assert str(created_id) == meal_id
    assert meals_table.last_payload["meal_type"] == "lunch"  # type: ignore[index]
    assert meals[0].serving_size_g == 150
    assert meals[0].meal_type is MealType.LUNCH
    assert repository.delete(uuid4(), created_id) == 0


def test_supabase_meal_search_merges_name_and_brand_matches() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    user_id = str(uuid4())
    shared_id = str(uuid4())
    meals_table.queue("select", [_meal_row(shared_id, user_id, "Barilla Pasta")])
    meals_table.queue(
        "select",
        [
            _meal_row(shared_id, user_id, "Barilla Pasta"),
            _meal_row(str(uuid4()), user_id, "Fusilli", brand="Barilla"),
        ],
    )

    repository = SupabaseMealRepository(client)
    meals = repository.search_by_name_or_brand("barilla", limit=10)

    assert [meal.name for meal in meals] == ["Barilla Pasta", "Fusilli"]
    assert ("brand", "%barilla%") in meals_table.last_filters


def test_supabase_search_cache_repository() -> None:
    client = FakeSupabaseClient()
    cache_table = client.table("search_cache")
    product = make_product("1", "Pollo").to_wire()
    cache_table.queue(
        "select",
        [{"query": "pollo", "results": [product], "created_at": None}],
    )
    cache_table.queue(
        "select",
        [{"query": "pollo arrosto"}, {"query": "pollo"}, {"query": "xpollo"}],
    )
    cache_table.queue(
        "select",
        [{"query": "pollo", "results": [product], "created_at": None}],
    )

    repository = SupabaseSearchCacheRepository(client)
    exact = repository.get("pollo")
    prefix = repository.find_shortest_with_prefix("poll")
    repository.upsert("pollo", [make_product("1", "Pollo")])

    assert exact is not None
    assert exact.results[0].name == "Pollo"
    assert prefix is not None
    assert prefix.query == "pollo"
    assert ("query", "pollo") in cache_table.last_filters
    assert cache_table.last_options == {"on_conflict": "query"}
    assert cache_table.last_payload["results"][0]["imageUrl"] is None  # type: ignore[index]


def test_supabase_profile_repository() -> None:
    client = FakeSupabaseClient()
    profiles_table = client.table("profiles")
    user_id = uuid4()
    profiles_table.queue(
        "select",
        [
            {
                "user_id": str(user_id),
                "weight": 80,
                "height": 180,
                "age": 40,
                "gender": "male",
                "activity_level": 1.55,
                "daily_kcal_goal": 2682,
                "use_custom_goal": False,
            }
        ],
    )

    repository = SupabaseProfileRepository(client)
    profile = repository.get_profile(user_id)
    repository.upsert_profile(Profile(user_id=user_id, use_custom_goal=True))

    assert profile is not None
    assert profile.activity_level == 1.55
    assert repository.get_profile(uuid4()) is None
    assert profiles_table.last_options == {"on_conflict": "user_id"}


def test_supabase_prefix_scan_pages_through_keys() -> None:
    client = FakeSupabaseClient()
    cache_table = client.table("search_cache")
    cache_table.queue("select", [{"query": "pollo arrosto"}, {"query": "pomodoro"}])
    cache_table.queue("select", [{"query": "pollo"}, {"query": "polenta"}])
    cache_table.queue("select", [{"query": "po"}])
    cache_table.queue(
        "select",
        [{"query": "po", "results": [make_product("7", "Po")], "created_at": None}],
    )

    repository = SupabaseSearchCacheRepository(client, key_page_size=2)
    entry = repository.find_shortest_with_prefix("p")

    assert entry is not None
    assert entry.query == "po"
    assert cache_table.ranges == [(0, 1), (2, 3), (4, 5)]


def test_supabase_duplicate_email_on_insert_is_typed() -> None:
    client = FakeSupabaseClient()
    client.table("users").error = APIError(
        {
            "code": "23505",
            "message": 'duplicate key value violates unique constraint "users_email_key"',
        }
    )

    repository = SupabaseUserRepository(client)

    with pytest.raises(DuplicateEmailError):
        repository.create_user("a@x.com", "hash", "Alice", "verify-token")


@pytest.mark.parametrize(
    "call",
    [
        lambda client: SupabaseUserRepository(client).get_by_email("a@x.com"),
        lambda client: SupabaseUserRepository(client).create_user(
            "a@x.com", "hash", "Alice", "verify-token"
        ),
        lambda client: SupabaseMealRepository(client).list_by_date(
            uuid4(), date(2024, 5, 1)
        ),
        lambda client: SupabaseSearchCacheRepository(client).upsert("pollo", []),
        lambda client: SupabaseProfileRepository(client).get_profile(uuid4()),
    ],
)
def test_supabase_database_failures_become_storage_errors(call) -> None:  # type: ignore[no-untyped-def]
    client = FakeSupabaseClient()
    for name in ("users", "meals", "search_cache", "profiles"):
        client.table(name).error = APIError(
            {"code": "57014", "message": "canceling statement due to statement timeout"}
        )

    with pytest.raises(StorageError):
        call(client)


def test_supabase_meal_search_drops_wildcard_false_positives() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    user_id = str(uuid4())
    meals_table.queue(
        "select",
        [
            _meal_row(str(uuid4()), user_id, "Tofu"),
            _meal_row(str(uuid4()), user_id, "To*fu spread"),
        ],
    )

    repository = SupabaseMealRepository(client)
    meals = repository.search_by_name_or_brand("to*fu", limit=10)

    assert [meal.name for meal in meals] == ["To*fu spread"]
