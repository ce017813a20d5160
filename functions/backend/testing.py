"""
Helpers for exercising the API against in-memory backends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from fastapi.testclient import TestClient

from backend.app import create_app
from backend.cache import InMemoryTranslationCache
from backend.config import Settings, get_settings
from backend.db import InMemoryDbClient
from backend.dependencies import (
    get_db_client,
    get_geocoding_client,
    get_identity_provider,
    get_mailer,
    get_payment_gateway,
    get_push_sender,
    get_storage_client,
    get_translation_cache,
)
from backend.geocoding import InMemoryGeocodingClient
from backend.identity import AccountRecord, AuthenticatedUser, InMemoryIdentityProvider
from backend.mailer import InMemoryMailer
from backend.payments import InMemoryPaymentGateway
from backend.push import InMemoryPushSender
from backend.storage import InMemoryStorageClient
from shared.constants import USERS_COLLECTION
from shared.types import UserRole


def make_settings(**overrides) -> Settings:
    values = {"gemini_api_key": "test-key", "use_in_memory_backends": True}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@dataclass
class Backends:
    db: InMemoryDbClient = field(default_factory=InMemoryDbClient)
    identity: InMemoryIdentityProvider = field(default_factory=InMemoryIdentityProvider)
    push: InMemoryPushSender = field(default_factory=InMemoryPushSender)
    cache: InMemoryTranslationCache = field(default_factory=InMemoryTranslationCache)
    payments: InMemoryPaymentGateway = field(default_factory=InMemoryPaymentGateway)
    mailer: InMemoryMailer = field(default_factory=InMemoryMailer)
    storage: InMemoryStorageClient = field(default_factory=InMemoryStorageClient)
    geocoder: InMemoryGeocodingClient = field(default_factory=InMemoryGeocodingClient)
    settings: Settings = field(default_factory=make_settings)

    def add_user(
        self,
        uid: str,
        email: Optional[str] = None,
        name: str = "Test User",
        role: UserRole = UserRole.USER,
        profile: Optional[dict] = None,
    ) -> dict:
        """
        Registers an account and profile. Returns auth headers carrying the
        token `token-<uid>`.
        """
        email = email or f"{uid}@example.com"
        self.identity.tokens[f"token-{uid}"] = AuthenticatedUser(
            uid=uid, email=email, name=name, role=role
        )
        self.identity.accounts[email.lower()] = AccountRecord(
            uid=uid, email=email, display_name=name
        )
        if profile is not None:
            self.db.seed(
                USERS_COLLECTION, uid, {"uid": uid, "email": email, "name": name, **profile}
            )
        return {"Authorization": f"Bearer token-{uid}"}


def create_test_client(backends: Optional[Backends] = None) -> tuple[TestClient, Backends]:
    backends = backends or Backends()
    app = create_app()
    app.dependency_overrides.update(
        {
            get_db_client: lambda: backends.db,
            get_identity_provider: lambda: backends.identity,
            get_push_sender: lambda: backends.push,
            get_translation_cache: lambda: backends.cache,
            get_payment_gateway: lambda: backends.payments,
            get_mailer: lambda: backends.mailer,
            get_storage_client: lambda: backends.storage,
            get_geocoding_client: lambda: backends.geocoder,
            get_settings: lambda: backends.settings,
        }
    )
    return TestClient(app), backends
