"""Food search resolution over the shared cache, meal history and Open Food Facts."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import httpx

from food_diary.adapters.off_client import OpenFoodFactsClient
from food_diary.domain.errors import UpstreamUnavailableError, ValidationError
from food_diary.domain.meals import MealEntry
from food_diary.domain.nutrition import (
    FoodProduct,
    Macros,
    SearchCacheEntry,
    SearchResolution,
    SearchSource,
)
from food_diary.services.cache import Cache
from food_diary.services.meals import MealService

_KJ_PER_KCAL = 4.184
_UNKNOWN_PRODUCT = "Unknown Product"

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class SearchCacheRepository(Protocol):
    """Persistence interface for the process-wide search cache."""

    def get(self, query: str) -> SearchCacheEntry | None:
        """Return the entry stored under exactly ``query``."""

    def find_shortest_with_prefix(self, prefix: str) -> SearchCacheEntry | None:
        """Return the entry with the shortest key starting with ``prefix``."""

    def upsert(self, query: str, results: list[FoodProduct]) -> None:
        """Store ``results`` under ``query``, replacing any previous entry."""


def normalize_query(query: str) -> str:
    """Lowercase and trim a search string to form its cache key."""
    return query.strip().lower()


@dataclass
class NutritionService:
    """Resolves food searches while keeping external API calls to a minimum.

    ``resolve`` walks the tiers in order (exact cache, prefix cache, meal history)
    and never calls the external API. ``search_live`` is the explicit external
    search; it writes successful results back to the cache, and failures leave
    the cache as it was.
    """

    cache_repository: SearchCacheRepository
    meal_service: MealService
    off_client: OpenFoodFactsClient
    barcode_cache: Cache
    history_limit: int = 10
    live_page_size: int = 15
    barcode_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    def resolve(self, query: str) -> SearchResolution:
        """Answer a query from the cache tiers and meal history only."""
        normalized = normalize_query(query or "")
        if not normalized:
            raise ValidationError("Search query is required")

        exact = self.cache_repository.get(normalized)
        if exact is not None:
            _logger.info("Cache exact hit: query=%s", normalized)
            return SearchResolution(results=exact.results, source=SearchSource.EXACT)

        prefix = self.cache_repository.find_shortest_with_prefix(normalized)
        if prefix is not None and prefix.results:
            _logger.info(
                "Cache prefix hit: query=%s key=%s", normalized, prefix.query
            )
            return SearchResolution(results=prefix.results, source=SearchSource.PREFIX)

        history = self.meal_service.search_history(normalized, limit=self.history_limit)
        if history:
            _logger.info("History hit: query=%s rows=%s", normalized, len(history))
            stamp = int(time.time() * 1000)
            return SearchResolution(
                results=[
                    _history_product(entry, index, stamp)
                    for index, entry in enumerate(history)
                ],
                source=SearchSource.HISTORY,
            )

        _logger.info("Cache miss: query=%s", normalized)
        return SearchResolution(results=None, source=SearchSource.NONE)

    def cache_results(self, query: str, results: list[FoodProduct]) -> None:
        """Upsert a result set under the normalized query."""
        normalized = normalize_query(query or "")
        if not normalized:
            raise ValidationError("Query and results are required")
        self.cache_repository.upsert(normalized, results)
        _logger.info("Cached results: query=%s count=%s", normalized, len(results))

    async def search_live(self, query: str) -> list[FoodProduct]:
        """Search Open Food Facts and write the results back to the cache."""
        normalized = normalize_query(query or "")
        if not normalized:
            raise ValidationError("Search query is required")
        payload = await self._call_upstream(
            lambda: self.off_client.search_products(
                query.strip(), page_size=self.live_page_size
            ),
            action=f"search:{normalized}",
        )
        products = [
            product
            for product in (
                map_product(raw) for raw in payload.get("products", []) or []
            )
            if product is not None
        ]
        self.cache_repository.upsert(normalized, products)
        _logger.info("Live search: query=%s results=%s", normalized, len(products))
        return products

    async def search(self, query: str, live: bool = False) -> SearchResolution:
        """Resolve a query, optionally forcing a live search first.

        A failed live search degrades to the cached tiers; the upstream error
        only surfaces when those have nothing either.
        """
        if not live:
            return self.resolve(query)
        try:
            products = await self.search_live(query)
        except UpstreamUnavailableError:
            fallback = self.resolve(query)
            if fallback.results:
                return fallback
            raise
        return SearchResolution(results=products, source=SearchSource.LIVE)

    async def lookup_barcode(self, barcode: str) -> FoodProduct | None:
        """Return a product by barcode, or None when the database has no match."""
        code = (barcode or "").strip()
        if not code:
            raise ValidationError("Barcode is required")
        cache_key = f"off:barcode:{code}"
        cached = self.barcode_cache.get(cache_key)
        if isinstance(cached, FoodProduct):
            return cached

        payload = await self._call_upstream(
            lambda: self.off_client.get_product(code), action=f"barcode:{code}"
        )
        raw = payload.get("product")
        if payload.get("status") == 0 or not isinstance(raw, dict):
            return None
        product = map_product(raw)
        if product is not None:
            self.barcode_cache.set(
                cache_key, product, ttl_seconds=self.barcode_ttl_seconds
            )
        return product

    async def _call_upstream(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call Open Food Facts with a short retry; failures become typed errors."""
        attempt = 0
        while True:
            try:
                return await func()
            except (httpx.HTTPError, asyncio.TimeoutError, ValueError) as exc:
                attempt += 1
                _logger.warning(
                    "Open Food Facts %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise UpstreamUnavailableError from exc
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _as_float(value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0


def _first_positive(*values: float) -> float:
    for value in values:
        if value:
            return value
    return 0.0


def map_product(raw: dict[str, object]) -> FoodProduct | None:
    """Map an Open Food Facts product to a FoodProduct with per-100g values."""
    nutriments = raw.get("nutriments") or {}
    if not isinstance(nutriments, dict):
        nutriments = {}
    name = str(raw.get("product_name") or "").strip() or _UNKNOWN_PRODUCT
    if name == _UNKNOWN_PRODUCT and not nutriments.get("energy-kcal_100g"):
        return None

    calories = _first_positive(
        _as_float(nutriments.get("energy-kcal_100g")),
        _as_float(nutriments.get("energy-kcal")),
        _as_float(nutriments.get("energy-kj_100g")) / _KJ_PER_KCAL,
        _as_float(nutriments.get("energy_100g")) / _KJ_PER_KCAL,
    )
    serving = _as_float(raw.get("serving_quantity"))
    product_id = raw.get("code") or raw.get("_id") or f"temp-{int(time.time() * 1000)}"
    return FoodProduct(
        id=str(product_id),
        name=name,
        brand=str(raw.get("brands") or "").strip() or None,
        calories=round(calories),
        macros=Macros(
            proteins=round(
                _as_float(
                    nutriments.get("proteins_100g") or nutriments.get("proteins")
                ),
                1,
            ),
            carbs=round(
                _as_float(
                    nutriments.get("carbohydrates_100g")
                    or nutriments.get("carbohydrates")
                ),
                1,
            ),
            fats=round(
                _as_float(nutriments.get("fat_100g") or nutriments.get("fat")), 1
            ),
        ),
        image_url=raw.get("image_front_url") or None,
        suggested_serving_size=serving or None,
    )


def _history_product(entry: MealEntry, index: int, stamp: int) -> FoodProduct:
    """Scale a logged meal back to a per-100g FoodProduct."""
    factor = 100 / (entry.serving_size_g or 100)
    return FoodProduct(
        id=f"hist-{index}-{stamp}",
        name=entry.name,
        brand=entry.brand or "",
        calories=round(entry.calories * factor),
        macros=Macros(
            proteins=round(entry.proteins_g * factor, 1),
            carbs=round(entry.carbs_g * factor, 1),
            fats=round(entry.fats_g * factor, 1),
        ),
        image_url=entry.image_url,
        suggested_serving_size=entry.serving_size_g,
    )
