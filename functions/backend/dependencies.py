"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin

from backend.cache import InMemoryTranslationCache, RedisTranslationCache, TranslationCache
from backend.config import get_settings
from backend.db import DbClient, FirestoreDbClient, InMemoryDbClient
from backend.geocoding import GeocodingClient, GoogleGeocodingClient, InMemoryGeocodingClient
from backend.identity import FirebaseIdentityProvider, IdentityProvider, InMemoryIdentityProvider
from backend.mailer import InMemoryMailer, Mailer, ResendMailer
from backend.payments import InMemoryPaymentGateway, PaymentGateway, RazorpayClient
from backend.push import FirebasePushSender, InMemoryPushSender, PushSender
from backend.storage import CloudinaryStorageClient, InMemoryStorageClient, StorageClient

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_translation_cache: TranslationCache | None = None
_payment_gateway: PaymentGateway | None = None
_mailer: Mailer | None = None
_identity_provider: IdentityProvider | None = None
_push_sender: PushSender | None = None
_storage_client: StorageClient | None = None
_geocoding_client: GeocodingClient | None = None


def _use_firebase() -> bool:
    settings = get_settings()
    return not settings.use_in_memory_backends and bool(settings.firebase_project_id)


def _ensure_firebase_app() -> None:
    try:
        firebase_admin.get_app()
    except ValueError:
        firebase_admin.initialize_app(
            options={"projectId": get_settings().firebase_project_id}
        )


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    if _use_firebase():
        _ensure_firebase_app()
        _db_client = FirestoreDbClient()
    else:
        logger.warning("Using in-memory document store")
        _db_client = InMemoryDbClient()
    return _db_client


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider:
        return _identity_provider

    if _use_firebase():
        _ensure_firebase_app()
        _identity_provider = FirebaseIdentityProvider()
    else:
        _identity_provider = InMemoryIdentityProvider()
    return _identity_provider


def get_push_sender() -> PushSender:
    global _push_sender
    if _push_sender:
        return _push_sender

    if _use_firebase():
        _ensure_firebase_app()
        _push_sender = FirebasePushSender()
    else:
        _push_sender = InMemoryPushSender()
    return _push_sender


def get_translation_cache() -> TranslationCache:
    """
    Return a singleton translation cache shared by all requests.
    """
    global _translation_cache
    if _translation_cache:
        return _translation_cache

    settings = get_settings()
    if settings.redis_url and not settings.use_in_memory_backends:
        _translation_cache = RedisTranslationCache(
            url=settings.redis_url, key_prefix=settings.redis_cache_prefix
        )
    else:
        _translation_cache = InMemoryTranslationCache()
    return _translation_cache


def get_payment_gateway() -> PaymentGateway:
    global _payment_gateway
    if _payment_gateway:
        return _payment_gateway

    settings = get_settings()
    if settings.use_in_memory_backends:
        _payment_gateway = InMemoryPaymentGateway()
    else:
        # Missing keys surface per request as "Razorpay not configured".
        _payment_gateway = RazorpayClient(
            key_id=settings.razorpay_key_id, key_secret=settings.razorpay_key_secret
        )
    return _payment_gateway


def get_mailer() -> Mailer:
    global _mailer
    if _mailer:
        return _mailer

    settings = get_settings()
    if settings.use_in_memory_backends:
        _mailer = InMemoryMailer()
    else:
        _mailer = ResendMailer(api_key=settings.resend_api_key, sender=settings.email_sender)
    return _mailer


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient()
    else:
        # Missing config surfaces per upload as a StorageError.
        _storage_client = CloudinaryStorageClient(
            cloud_name=settings.cloudinary_cloud_name or "",
            upload_preset=settings.cloudinary_upload_preset or "",
        )
    return _storage_client


def get_geocoding_client() -> GeocodingClient:
    global _geocoding_client
    if _geocoding_client:
        return _geocoding_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _geocoding_client = InMemoryGeocodingClient()
    else:
        _geocoding_client = GoogleGeocodingClient(api_key=settings.google_maps_api_key)
    return _geocoding_client
