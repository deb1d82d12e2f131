"""Food search endpoints backed by the shared search cache."""

from fastapi import APIRouter, Depends, HTTPException, status

from food_diary.api.dependencies import get_container
from food_diary.api.schemas import CacheWriteRequest
from food_diary.containers import AppContainer
from food_diary.domain.errors import ValidationError
from food_diary.domain.nutrition import SearchResolution

router = APIRouter(prefix="/search", tags=["search"])


def _resolution_body(resolution: SearchResolution) -> dict[str, object]:
    results = resolution.results
    return {
        "results": None if results is None else [item.to_wire() for item in results],
        "source": resolution.source.value,
    }


@router.get("/cache")
async def read_cache(
    q: str | None = None, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Resolve a query from the cache tiers and meal history."""
    resolution = container.nutrition_service.resolve(q or "")
    return _resolution_body(resolution)


@router.post("/cache")
async def write_cache(
    body: CacheWriteRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    """Store a result set for a query, replacing any previous one."""
    if not body.query or body.results is None:
        raise ValidationError("Query and results are required")
    container.nutrition_service.cache_results(body.query, body.results)
    return {"message": "Search results cached"}


@router.get("/live")
async def live_search(
    q: str | None = None, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Search the external food database, falling back to cached tiers."""
    resolution = await container.nutrition_service.search(q or "", live=True)
    return _resolution_body(resolution)


@router.get("/barcode/{barcode}")
async def barcode_lookup(
    barcode: str, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    product = await container.nutrition_service.lookup_barcode(barcode)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product.to_wire()
