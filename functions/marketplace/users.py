# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""User profiles: onboarding, phone numbers, saved addresses and reviews."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from marketplace.notifications import create_notification
from shared.constants import MAX_REVIEW_COMMENT_LENGTH
from shared.json_utils import to_document
from shared.types import (
    AddressType,
    Education,
    Employment,
    Location,
    Notification,
    NotificationType,
    Review,
    UserProfile,
)
from shared.utils import get_unique_id, now_ms
from shared.validation import normalize_phone_number

logger = logging.getLogger(__name__)

_ADDRESS_TYPE_LABELS = {
    AddressType.HOME: "Home",
    AddressType.OFFICE: "Office",
}


class PhoneNumberInUseError(Exception):
    pass


def _get_user(db, uid: str) -> dict:
    user = db.get_user(uid)
    if user is None:
        raise LookupError("User not found")
    return user


def create_user_profile(db, uid: str, email: str, name: str) -> dict:
    """Writes the default user document created at sign-up."""
    profile = UserProfile(
        uid=uid,
        email=(email or "").strip().lower(),
        name=name.strip(),
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    doc = to_document(profile)
    db.create_user(uid, doc)
    logger.info("Created profile for %s", uid)
    return doc


def get_verification_status(db, uid: str) -> Optional[dict]:
    user = db.get_user(uid)
    if user is None:
        return None
    return {
        "emailVerified": bool(user.get("emailVerified")),
        "phoneVerified": bool(user.get("phoneVerified")),
        "profileComplete": bool(user.get("profileComplete")),
    }


def check_onboarding_status(db, uid: str) -> Optional[dict]:
    user = db.get_user(uid)
    if user is None:
        return None
    return {
        "onboardingComplete": bool(user.get("onboardingComplete")),
        "education": user.get("education"),
        "employment": user.get("employment"),
        "location": user.get("location"),
        "address": user.get("address"),
    }


def update_education(db, uid: str, education: Education) -> None:
    db.update_user(uid, {"education": to_document(education)})


def update_employment(db, uid: str, employment: Employment) -> None:
    db.update_user(uid, {"employment": to_document(employment)})


def update_location(db, uid: str, location: Location) -> None:
    db.update_user(uid, {"location": to_document(location, drop_none=True)})


def update_user_address(db, uid: str, address: str) -> None:
    db.update_user(uid, {"address": address})


def complete_onboarding(db, uid: str) -> None:
    db.update_user(uid, {"onboardingComplete": True})


def check_phone_number_exists(
    db, phone_number: str, exclude_uid: Optional[str] = None
) -> bool:
    """True when another account already uses the phone number."""
    phone_number = normalize_phone_number(phone_number)
    return any(
        uid != exclude_uid for uid, _ in db.find_users("phoneNumber", phone_number)
    )


def add_phone_to_user(db, uid: str, phone_number: str) -> str:
    """Stores a verified phone number and marks the profile complete."""
    phone_number = normalize_phone_number(phone_number)
    if check_phone_number_exists(db, phone_number, exclude_uid=uid):
        raise PhoneNumberInUseError(
            "This phone number is already registered with another account."
        )
    db.update_user(
        uid,
        {"phoneNumber": phone_number, "phoneVerified": True, "profileComplete": True},
    )
    return phone_number


def format_address(address: dict) -> str:
    label = _ADDRESS_TYPE_LABELS.get(address.get("type"), "Other")
    return f"{label}: {address.get('houseNumber')}, {address.get('detailedAddress')}"


def _primary_location_fields(address: dict) -> dict:
    return {"location": address["location"], "address": format_address(address)}


def get_user_addresses(db, uid: str) -> List[dict]:
    user = db.get_user(uid)
    return list((user or {}).get("savedAddresses") or [])


def add_user_address(db, uid: str, address: dict) -> str:
    """
    Saves a new address. A default address replaces the previous default and
    becomes the user's primary `location` and `address`.

    Args:
        address: camelCase fields of a SavedAddress without `id`/`createdAt`.

    Returns:
        The new address id.
    """
    addresses = get_user_addresses(db, uid)
    if address.get("isDefault"):
        addresses = [{**existing, "isDefault": False} for existing in addresses]

    new_address = {**address, "id": get_unique_id("addr"), "createdAt": now_ms()}
    addresses.append(new_address)

    fields = {"savedAddresses": addresses}
    if new_address.get("isDefault"):
        fields.update(_primary_location_fields(new_address))
    db.update_user(uid, fields)
    return new_address["id"]


def update_saved_address(db, uid: str, address_id: str, updates: dict) -> dict:
    addresses = get_user_addresses(db, uid)
    index = next(
        (i for i, existing in enumerate(addresses) if existing.get("id") == address_id),
        None,
    )
    if index is None:
        raise LookupError("Address not found")

    updates = {k: v for k, v in updates.items() if k not in ("id", "createdAt")}
    if updates.get("isDefault"):
        addresses = [{**existing, "isDefault": False} for existing in addresses]
    addresses[index] = {**addresses[index], **updates}

    fields = {"savedAddresses": addresses}
    if updates.get("isDefault"):
        fields.update(_primary_location_fields(addresses[index]))
    db.update_user(uid, fields)
    return addresses[index]


def delete_address(db, uid: str, address_id: str) -> None:
    addresses = get_user_addresses(db, uid)
    remaining = [a for a in addresses if a.get("id") != address_id]
    if len(remaining) == len(addresses):
        raise LookupError("Address not found")
    db.update_user(uid, {"savedAddresses": remaining})


def set_default_address(db, uid: str, address_id: str) -> dict:
    addresses = [
        {**existing, "isDefault": existing.get("id") == address_id}
        for existing in get_user_addresses(db, uid)
    ]
    default = next((a for a in addresses if a["isDefault"]), None)
    if default is None:
        raise LookupError("Address not found")
    db.update_user(uid, {"savedAddresses": addresses, **_primary_location_fields(default)})
    return default


def add_review(db, uid: str, review: Review) -> float:
    """
    Appends a review to the user and recomputes their average rating.

    Returns:
        The new rating, rounded to one decimal.
    """
    if review.reviewer_id == uid:
        raise ValueError("You cannot review yourself.")
    if not 1 <= review.rating <= 5:
        raise ValueError("Rating must be between 1 and 5.")
    if len(review.comment or "") > MAX_REVIEW_COMMENT_LENGTH:
        raise ValueError(
            f"Review comment must be at most {MAX_REVIEW_COMMENT_LENGTH} characters."
        )

    user = _get_user(db, uid)
    review.created_at = now_ms()
    reviews = list(user.get("reviews") or [])
    reviews.append(to_document(review, drop_none=True))
    rating = round(sum(r.get("rating", 0) for r in reviews) / len(reviews), 1)
    db.update_user(uid, {"reviews": reviews, "rating": rating})

    create_notification(
        db,
        Notification(
            user_id=uid,
            type=NotificationType.REVIEW_RECEIVED,
            title="New Review",
            message=f"{review.reviewer_name} rated you {review.rating}/5",
            job_id=review.job_id,
        ),
    )
    return rating
