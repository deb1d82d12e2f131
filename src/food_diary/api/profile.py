"""Profile endpoints for the authenticated user."""

from fastapi import APIRouter, Depends

from food_diary.api.dependencies import get_container, require_user
from food_diary.api.schemas import ProfileUpdateRequest, profile_to_dict
from food_diary.containers import AppContainer
from food_diary.domain.models import PublicUser

router = APIRouter(prefix="/user", tags=["profile"])


@router.get("/profile")
async def get_profile(
    user: PublicUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    profile = container.profile_service.get_profile(user.id)
    return {"name": user.name, "email": user.email, **profile_to_dict(profile)}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    user: PublicUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update body metrics; the calorie goal follows them unless custom."""
    profile = container.profile_service.update_profile(user.id, body.to_update())
    return {"message": "Profile updated", "profile": profile_to_dict(profile)}
