"""
Identity provider access: ID token verification, e-mail action links and
role claims, backed by Firebase Auth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from firebase_admin import auth

from shared.types import UserRole

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    pass


class UnknownAccountError(LookupError):
    pass


@dataclass
class AuthenticatedUser:
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole = UserRole.USER


@dataclass
class AccountRecord:
    uid: str
    email: Optional[str]
    display_name: Optional[str]


class IdentityProvider(Protocol):
    def verify_id_token(self, token: str) -> AuthenticatedUser:
        ...

    def generate_email_verification_link(self, email: str, continue_url: str) -> str:
        ...

    def generate_password_reset_link(self, email: str, continue_url: str) -> str:
        ...

    def get_user_by_email(self, email: str) -> AccountRecord:
        ...

    def set_role(self, uid: str, role: UserRole) -> None:
        ...


def _role_from_claims(claims: dict) -> UserRole:
    try:
        return UserRole(claims.get("role") or UserRole.USER)
    except ValueError:
        return UserRole.USER


@dataclass
class FirebaseIdentityProvider:
    """Firebase Auth through the firebase-admin SDK."""

    def verify_id_token(self, token: str) -> AuthenticatedUser:
        try:
            claims = auth.verify_id_token(token)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError) as e:
            raise InvalidTokenError(str(e)) from e
        return AuthenticatedUser(
            uid=claims["uid"],
            email=claims.get("email"),
            name=claims.get("name"),
            role=_role_from_claims(claims),
        )

    def generate_email_verification_link(self, email: str, continue_url: str) -> str:
        settings = auth.ActionCodeSettings(url=continue_url, handle_code_in_app=False)
        try:
            return auth.generate_email_verification_link(
                email, action_code_settings=settings
            )
        except auth.UserNotFoundError as e:
            raise UnknownAccountError(f"No account found for {email}") from e

    def generate_password_reset_link(self, email: str, continue_url: str) -> str:
        settings = auth.ActionCodeSettings(url=continue_url, handle_code_in_app=False)
        try:
            return auth.generate_password_reset_link(email, action_code_settings=settings)
        except auth.UserNotFoundError as e:
            raise UnknownAccountError(f"No account found for {email}") from e

    def get_user_by_email(self, email: str) -> AccountRecord:
        try:
            record = auth.get_user_by_email(email)
        except auth.UserNotFoundError as e:
            raise UnknownAccountError(f"No account found for {email}") from e
        return AccountRecord(
            uid=record.uid, email=record.email, display_name=record.display_name
        )

    def set_role(self, uid: str, role: UserRole) -> None:
        auth.set_custom_user_claims(uid, {"role": str(role)})
        logger.info("Set role %s for %s", role, uid)


@dataclass
class InMemoryIdentityProvider:
    """
    Test double. Tokens map directly to users, e.g. {"token-alice": AuthenticatedUser("alice")}.
    """

    tokens: dict[str, AuthenticatedUser] = field(default_factory=dict)
    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    roles: dict[str, UserRole] = field(default_factory=dict)

    def verify_id_token(self, token: str) -> AuthenticatedUser:
        user = self.tokens.get(token)
        if user is None:
            raise InvalidTokenError("Invalid ID token")
        role = self.roles.get(user.uid)
        return AuthenticatedUser(
            uid=user.uid, email=user.email, name=user.name, role=role or user.role
        )

    def generate_email_verification_link(self, email: str, continue_url: str) -> str:
        self.get_user_by_email(email)
        return f"https://auth.test/verify?email={email}&continueUrl={continue_url}"

    def generate_password_reset_link(self, email: str, continue_url: str) -> str:
        self.get_user_by_email(email)
        return f"https://auth.test/reset?email={email}&continueUrl={continue_url}"

    def get_user_by_email(self, email: str) -> AccountRecord:
        record = self.accounts.get(email.lower())
        if record is None:
            raise UnknownAccountError(f"No account found for {email}")
        return record

    def set_role(self, uid: str, role: UserRole) -> None:
        self.roles[uid] = role
