"""Supabase repository for the shared food search cache."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from food_diary.adapters.supabase_errors import execute
from food_diary.domain.nutrition import FoodProduct, SearchCacheEntry
from food_diary.services.nutrition import SearchCacheRepository

_KEY_PAGE_SIZE = 1000


@dataclass
class SupabaseSearchCacheRepository(SearchCacheRepository):
    """Supabase implementation of the query -> results cache."""

    client: Client
    key_page_size: int = _KEY_PAGE_SIZE

    def get(self, query: str) -> SearchCacheEntry | None:
        """Return the cache entry stored under exactly ``query``."""
        response = execute(
            self.client.table("search_cache")
            .select("query, results, created_at")
            .eq("query", query)
            .limit(1),
            "read search cache",
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def find_shortest_with_prefix(self, prefix: str) -> SearchCacheEntry | None:
        """Return the entry under the shortest cached key that starts with ``prefix``.

        Only keys are scanned, page by page, so the server row cap cannot hide
        the shortest one; the winning entry is then loaded on its own.
        """
        best: str | None = None
        offset = 0
        while True:
            response = execute(
                self.client.table("search_cache")
                .select("query")
                .like("query", f"{_escape_like(prefix)}%")
                .order("query")
                .range(offset, offset + self.key_page_size - 1),
                "scan search cache",
            )
            rows = response.data or []
            for row in rows:
                key = str(row["query"])
                if key.startswith(prefix) and (
                    best is None or (len(key), key) < (len(best), best)
                ):
                    best = key
            if len(rows) < self.key_page_size:
                break
            offset += self.key_page_size
        if best is None:
            return None
        return self.get(best)

    def upsert(self, query: str, results: list[FoodProduct]) -> None:
        """Insert or fully replace the entry for ``query``."""
        execute(
            self.client.table("search_cache").upsert(
                {
                    "query": query,
                    "results": [product.to_wire() for product in results],
                    "created_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="query",
            ),
            "write search cache",
        )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_entry(row: dict[str, object]) -> SearchCacheEntry:
    created_at = row.get("created_at")
    raw_results = row.get("results") or []
    if isinstance(raw_results, str):
        raw_results = json.loads(raw_results)
    return SearchCacheEntry(
        query=str(row["query"]),
        results=[FoodProduct.model_validate(item) for item in raw_results],
        created_at=datetime.fromisoformat(str(created_at)) if created_at else None,
    )
