"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    jwt_secret: str
    session_ttl_days: int = 7
    verification_ttl_hours: int = 24
    reset_ttl_minutes: int = 60
    password_hash_iterations: int = 200_000
    mail_api_key: str
    mail_api_url: str = "https://api.resend.com/emails"
    mail_sender: str = "Food Diary <no-reply@food-diary.app>"
    app_base_url: str = "http://localhost:3001"
    off_base_url: str = "https://it.openfoodfacts.org"
    off_country: str = "it"
    off_timeout_seconds: float = 60.0
    barcode_ttl_seconds: int = 86400
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
