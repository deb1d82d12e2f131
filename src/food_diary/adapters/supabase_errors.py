"""Translation of PostgREST failures into storage errors."""

from typing import Protocol

from postgrest.exceptions import APIError

from food_diary.domain.errors import StorageError

UNIQUE_VIOLATION = "23505"


class _Executable(Protocol):
    def execute(self): ...  # type: ignore[no-untyped-def]


def execute(query: _Executable, action: str):  # type: ignore[no-untyped-def]
    """Run a query builder; database failures surface as ``StorageError``."""
    try:
        return query.execute()
    except APIError as exc:
        raise StorageError(f"Failed to {action}: {exc.message}") from exc
