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

# Cloud functions for NeedYou - push delivery and nearby-job fan-out.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
from typing import Optional

# Third-party library imports
from firebase_admin import initialize_app
from firebase_functions import logger, options
from firebase_functions.firestore_fn import (
    DocumentSnapshot,
    Event,
    on_document_created,
)

# Local application imports
from backend.db import DbClient, FirestoreDbClient
from backend.push import FirebasePushSender, PushSender, StaleTokenError
from marketplace import nearby
from marketplace.notifications import build_push_message
from shared.constants import JOBS_COLLECTION, NOTIFICATIONS_COLLECTION

initialize_app()

# Notification fields forwarded in the FCM data payload for deep links.
PUSH_DATA_FIELDS = ["userId", "type", "jobId", "applicationId", "withdrawalId", "amount"]


def _send_push_for_notification(
    db: DbClient,
    sender: PushSender,
    notification_id: str,
    notification: dict,
) -> Optional[str]:
    """
    Sends the push for a newly written notification document.

    Returns:
        The FCM message id, or None when nothing was sent.
    """
    user_id = notification.get("userId")
    title = notification.get("title")
    if not user_id or not title:
        logger.warn(f"Notification {notification_id} has no userId or title")
        return None

    user = db.get_user(user_id)
    if user is None:
        logger.warn(f"User {user_id} not found for notification {notification_id}")
        return None

    token = user.get("fcmToken")
    if not token:
        logger.info(f"No FCM token for user {user_id}")
        return None

    data = {field: notification.get(field) for field in PUSH_DATA_FIELDS}
    data["notifId"] = notification_id
    message = build_push_message(
        token,
        title,
        notification.get("message") or "",
        data,
    )
    try:
        message_id = sender.send(message)
    except StaleTokenError:
        logger.warn(f"Clearing stale FCM token for user {user_id}")
        db.delete_user_field(user_id, "fcmToken")
        return None

    logger.info(f"Push sent for notification {notification_id}: {message_id}")
    return message_id


@on_document_created(
    document=NOTIFICATIONS_COLLECTION + "/{notifId}",
    memory=options.MemoryOption.MB_256,
)
def send_fcm_on_notification(event: Event[Optional[DocumentSnapshot]]) -> None:
    """
    Delivers a push notification for every notification document created.
    Delivery failures are logged and never retried.
    """
    if event.data is None:
        return

    notification_id = event.params["notifId"]
    try:
        _send_push_for_notification(
            FirestoreDbClient(),
            FirebasePushSender(),
            notification_id,
            event.data.to_dict() or {},
        )
    except Exception as e:
        logger.error(f"Failed to send push for notification {notification_id}: {e}")


@on_document_created(
    document=JOBS_COLLECTION + "/{jobId}",
    memory=options.MemoryOption.MB_512,
)
def notify_nearby_users_on_job_created(
    event: Event[Optional[DocumentSnapshot]],
) -> None:
    """
    Notifies every user within the nearby radius of a newly posted job.
    Each notification it writes triggers its own push.
    """
    if event.data is None:
        return

    job_id = event.params["jobId"]
    try:
        nearby.notify_nearby_users(FirestoreDbClient(), job_id, event.data.to_dict() or {})
    except Exception as e:
        logger.error(f"Failed to notify nearby users of job {job_id}: {e}")
