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
"""In-app notifications and the FCM push payload sent for them."""

import logging
from typing import Dict, List, Optional

from firebase_admin import messaging

from shared.constants import FCM_CHANNEL_ID, FCM_CLICK_ACTION
from shared.json_utils import from_document, to_document
from shared.types import Notification
from shared.utils import now_ms

logger = logging.getLogger(__name__)


def notification_to_document(notification: Notification) -> dict:
    """Stamps `createdAt` and `read` and drops unset optional fields."""
    notification.created_at = now_ms()
    notification.read = False
    return to_document(notification, drop_none=True)


def create_notification(db, notification: Notification) -> str:
    notification_id = db.add_notification(notification_to_document(notification))
    logger.info(
        "Created %s notification %s for %s",
        notification.type,
        notification_id,
        notification.user_id,
    )
    return notification_id


def get_user_notifications(db, user_id: str) -> List[dict]:
    """Returns the user's notifications, newest first, each with its `id`."""
    return [
        {"id": notification_id, **doc}
        for notification_id, doc in db.list_notifications(user_id)
    ]


def get_notification(db, notification_id: str) -> Optional[Notification]:
    doc = db.get_notification(notification_id)
    return from_document(Notification, doc) if doc else None


def mark_notification_as_read(db, user_id: str, notification_id: str) -> None:
    doc = db.get_notification(notification_id)
    if not doc or doc.get("userId") != user_id:
        raise LookupError("Notification not found")
    db.update_notification(notification_id, {"read": True})


def mark_all_notifications_as_read(db, user_id: str) -> int:
    unread = [
        notification_id
        for notification_id, doc in db.list_notifications(user_id)
        if not doc.get("read")
    ]
    if not unread:
        return 0
    return db.update_notifications(unread, {"read": True})


def build_push_message(
    token: str,
    title: str,
    body: str,
    data: Optional[Dict[str, object]] = None,
) -> messaging.Message:
    """
    Builds the FCM message delivered to the Android shell.

    FCM data payloads only carry strings, so every value is stringified and
    unset values are dropped. Title and body are repeated in `data` so the
    native service can render the notification while in the foreground.
    """
    payload = {
        key: str(value) for key, value in (data or {}).items() if value is not None
    }
    payload.update({"title": title, "body": body})
    return messaging.Message(
        token=token,
        notification=messaging.Notification(title=title, body=body),
        data=payload,
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                sound="default",
                channel_id=FCM_CHANNEL_ID,
                click_action=FCM_CLICK_ACTION,
            ),
        ),
    )
