"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from food_diary.adapters.mail_client import HttpxMailClient
from food_diary.adapters.off_client import HttpxOpenFoodFactsClient
from food_diary.adapters.supabase_meal_repository import SupabaseMealRepository
from food_diary.adapters.supabase_profile_repository import SupabaseProfileRepository
from food_diary.adapters.supabase_search_cache_repository import (
    SupabaseSearchCacheRepository,
)
from food_diary.adapters.supabase_user_repository import SupabaseUserRepository
from food_diary.config import Settings
from food_diary.services.accounts import AccountService
from food_diary.services.cache import InMemoryCache
from food_diary.services.meals import MealService
from food_diary.services.notifications import NotificationService
from food_diary.services.nutrition import NutritionService
from food_diary.services.passwords import PasswordHasher
from food_diary.services.profiles import ProfileService
from food_diary.services.tokens import TokenService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_service: TokenService
    account_service: AccountService
    notification_service: NotificationService
    meal_service: MealService
    nutrition_service: NutritionService
    profile_service: ProfileService
    close_resources: Callable[[], Awaitable[None]]


def build_token_service(settings: Settings) -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        session_ttl=timedelta(days=settings.session_ttl_days),
        verification_ttl=timedelta(hours=settings.verification_ttl_hours),
        reset_ttl=timedelta(minutes=settings.reset_ttl_minutes),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    search_cache_repository = SupabaseSearchCacheRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)

    mail_client = HttpxMailClient.create(
        api_key=resolved_settings.mail_api_key,
        api_url=resolved_settings.mail_api_url,
        sender=resolved_settings.mail_sender,
    )
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        country=resolved_settings.off_country,
        timeout_seconds=resolved_settings.off_timeout_seconds,
    )

    token_service = build_token_service(resolved_settings)
    notification_service = NotificationService(
        mail_client=mail_client,
        app_base_url=resolved_settings.app_base_url,
    )
    account_service = AccountService(
        repository=user_repository,
        tokens=token_service,
        hasher=PasswordHasher(iterations=resolved_settings.password_hash_iterations),
        notifications=notification_service,
    )
    meal_service = MealService(meal_repository)
    nutrition_service = NutritionService(
        cache_repository=search_cache_repository,
        meal_service=meal_service,
        off_client=off_client,
        barcode_cache=InMemoryCache(),
        barcode_ttl_seconds=resolved_settings.barcode_ttl_seconds,
    )
    profile_service = ProfileService(
        repository=profile_repository,
        user_repository=user_repository,
    )

    async def close_resources() -> None:
        await notification_service.drain()
        await mail_client.close()
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_service=token_service,
        account_service=account_service,
        notification_service=notification_service,
        meal_service=meal_service,
        nutrition_service=nutrition_service,
        profile_service=profile_service,
        close_resources=close_resources,
    )
