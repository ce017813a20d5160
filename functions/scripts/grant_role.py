"""
Grant a NeedYou role to an existing account.

Roles are stored as the `role` custom claim on the Firebase account. Use this
to bootstrap the first admin; later accountants can be managed from the admin
routes. Granting `accountant` also lists the account in the accountants
collection, and any other role removes it from there.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.db import DbClient
from backend.dependencies import get_db_client, get_identity_provider
from backend.identity import IdentityProvider, UnknownAccountError
from shared.types import UserRole
from shared.utils import now_ms

logger = logging.getLogger(__name__)


def grant_role(
    identity: IdentityProvider, db: DbClient, email: str, role: UserRole
) -> str:
    """Sets the role claim for `email` and returns the account uid."""
    account = identity.get_user_by_email(email.strip().lower())
    identity.set_role(account.uid, role)
    if role == UserRole.ACCOUNTANT:
        db.add_accountant(
            account.uid,
            {
                "uid": account.uid,
                "name": account.display_name or "Accountant",
                "email": account.email,
                "createdAt": now_ms(),
            },
        )
    else:
        db.delete_accountant(account.uid)
    return account.uid


def main() -> int:
    parser = argparse.ArgumentParser(description="Grant a role to a NeedYou account")
    parser.add_argument("email", help="E-mail address of the account")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ADMIN.value,
        help="Role to grant (default: admin)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    try:
        uid = grant_role(
            get_identity_provider(), get_db_client(), args.email, UserRole(args.role)
        )
    except UnknownAccountError as e:
        logger.error("%s", e)
        return 1

    logger.info("Granted %s to %s (%s)", args.role, args.email, uid)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
