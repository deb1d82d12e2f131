"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_SEARCH_FIELDS = (
    "code,product_name,brands,nutriments,image_front_url,serving_quantity"
)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts interactions."""

    async def search_products(
        self, query: str, page_size: int = 15
    ) -> dict[str, object]:
        """Search products by free text and return raw API data."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    country: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 60.0

    @classmethod
    def create(
        cls, base_url: str, country: str, timeout_seconds: float = 60.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            country=country,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": "FoodDiary/0.1 (food-diary.app)"}
            ),
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, query: str, page_size: int = 15
    ) -> dict[str, object]:
        """Full-text product search."""
        response = await self.http_client.get(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": query,
                "action": "process",
                "json": "1",
                "page_size": str(page_size),
                "cc": self.country,
                "lc": self.country,
                "fields": _SEARCH_FIELDS,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Barcode lookup; a 404 is reported as ``{"status": 0}``."""
        response = await self.http_client.get(
            f"{self.base_url}/api/v0/product/{barcode}.json",
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": 0}
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
