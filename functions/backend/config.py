"""
Configuration and settings for the NeedYou API service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import (
    DEFAULT_MIN_WITHDRAWAL_AMOUNT,
    DEFAULT_PLATFORM_FEE_PERCENT,
)


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Public URL of the web client, used as the continue URL of auth e-mails.
    public_app_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("PUBLIC_APP_URL", "NEXT_PUBLIC_API_URL"),
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Firebase (Firestore, Auth, Cloud Messaging)
    firebase_project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FIREBASE_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
    )

    # Razorpay
    razorpay_key_id: Optional[str] = None
    razorpay_key_secret: Optional[str] = None

    # Resend
    resend_api_key: Optional[str] = None
    email_sender: str = Field(default="NeedYou <noreply@need-you.xyz>")

    # Cloudinary
    cloudinary_cloud_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CLOUDINARY_CLOUD_NAME", "NEXT_PUBLIC_CLOUDINARY_CLOUD_NAME"
        ),
    )
    cloudinary_upload_preset: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CLOUDINARY_UPLOAD_PRESET", "NEXT_PUBLIC_CLOUDINARY_UPLOAD_PRESET"
        ),
    )

    # Google Maps
    google_maps_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "GOOGLE_MAPS_API_KEY", "NEXT_PUBLIC_GOOGLE_MAPS_API_KEY"
        ),
    )

    # LLM / Gemini
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY_TRANSLATE", "GEMINI_API_KEY"),
    )
    translation_model: str = Field(default="gemini-2.5-flash")

    # Translation cache (Redis). Without a URL the cache is process-local.
    redis_url: Optional[str] = None
    redis_cache_prefix: str = Field(default="needyou:translations:")

    # Wallet
    platform_fee_percent: float = Field(default=DEFAULT_PLATFORM_FEE_PERCENT, ge=0, le=100)
    min_withdrawal_amount: float = Field(default=DEFAULT_MIN_WITHDRAWAL_AMOUNT, gt=0)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "NEEDYOU_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
