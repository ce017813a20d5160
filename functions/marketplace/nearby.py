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
"""Fans out a notification to every user near a newly posted job."""

import logging
from typing import Iterable, List, Tuple

from marketplace.notifications import notification_to_document
from shared.constants import NEARBY_JOB_RADIUS_KM
from shared.distance import calculate_distance, get_coordinates
from shared.types import Notification, NotificationType
from shared.utils import format_amount

logger = logging.getLogger(__name__)


def find_nearby_recipients(
    job: dict,
    users: Iterable[Tuple[str, dict]],
    radius_km: float = NEARBY_JOB_RADIUS_KM,
) -> List[Tuple[str, float]]:
    """
    Linear scan over all users for those within `radius_km` of the job.

    Args:
        job (dict): The job document.
        users: (uid, user document) pairs.
        radius_km (float): Maximum distance, inclusive.

    Returns:
        List of (uid, distance_km) pairs. The poster is never included.
    """
    job_coordinates = get_coordinates(job)
    if job_coordinates is None:
        return []

    poster_id = job.get("userId")
    recipients = []
    for uid, user in users:
        if uid == poster_id:
            continue
        user_coordinates = get_coordinates(user)
        if user_coordinates is None:
            continue
        distance = calculate_distance(*user_coordinates, *job_coordinates)
        if distance <= radius_km:
            recipients.append((uid, distance))
    return recipients


def build_nearby_job_notification(
    uid: str, job_id: str, job: dict, distance: float
) -> Notification:
    title = job.get("title") or job.get("caption") or "New job"
    budget = job.get("budget")
    budget_text = f" for ₹{format_amount(budget)}" if budget else ""
    return Notification(
        user_id=uid,
        type=NotificationType.NEARBY_JOB,
        title="New job near you",
        message=f'"{title}"{budget_text} was posted {distance} km away',
        job_id=job_id,
        job_title=title,
        distance=distance,
    )


def notify_nearby_users(
    db, job_id: str, job: dict, radius_km: float = NEARBY_JOB_RADIUS_KM
) -> int:
    """Writes one notification per nearby user and returns how many were written."""
    recipients = find_nearby_recipients(job, db.list_users(), radius_km)
    if not recipients:
        logger.info("No users within %s km of job %s", radius_km, job_id)
        return 0

    docs = [
        notification_to_document(
            build_nearby_job_notification(uid, job_id, job, distance)
        )
        for uid, distance in recipients
    ]
    written = db.add_notifications(docs)
    logger.info("Notified %d nearby users of job %s", written, job_id)
    return written
