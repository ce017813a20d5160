"""
Request authentication with Firebase ID tokens and role claims.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from backend.dependencies import get_identity_provider
from backend.identity import AuthenticatedUser, IdentityProvider, InvalidTokenError
from shared.types import UserRole

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> AuthenticatedUser:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = authorization[len(BEARER_PREFIX) :].strip()
    try:
        return identity.verify_id_token(token)
    except InvalidTokenError as e:
        logger.info("Rejected ID token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid or expired token") from e


def require_role(*roles: UserRole):
    """Dependency factory admitting the given roles. Admins are always admitted."""

    def dependency(
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if user.role != UserRole.ADMIN and user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return dependency
