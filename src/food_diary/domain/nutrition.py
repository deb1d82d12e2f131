"""Nutrition domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Macros(BaseModel):
    """Macronutrients in grams."""

    proteins: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


class FoodProduct(BaseModel):
    """Food product as returned to clients and stored in the search cache."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    brand: str | None = None
    calories: float = 0
    macros: Macros = Field(default_factory=Macros)
    image_url: str | None = Field(default=None, alias="imageUrl")
    suggested_serving_size: float | None = Field(
        default=None, alias="suggestedServingSize"
    )

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class SearchSource(str, Enum):
    """Which resolution tier produced a search result."""

    EXACT = "exact"
    PREFIX = "prefix"
    HISTORY = "history"
    LIVE = "live"
    NONE = "none"


@dataclass(frozen=True)
class SearchCacheEntry:
    """Cached result set for a normalized query."""

    query: str
    results: list[FoodProduct]
    created_at: datetime | None = None


@dataclass(frozen=True)
class SearchResolution:
    """Outcome of a food search."""

    results: list[FoodProduct] | None
    source: SearchSource
