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

import unittest
from unittest.mock import patch

from backend.db import InMemoryDbClient
from marketplace import notifications
from shared.types import Notification, NotificationType


class NotificationsTest(unittest.TestCase):

    def setUp(self):
        self.db = InMemoryDbClient()

    @patch("marketplace.notifications.now_ms", return_value=1700000000000)
    def test_create_notification_stamps_and_drops_unset_fields(self, _):
        notification_id = notifications.create_notification(
            self.db,
            Notification(
                user_id="u1",
                type=NotificationType.BUDGET_ACCEPTED,
                title="Offer Accepted!",
                message="Accepted",
                read=True,
                job_id="job1",
            ),
        )

        doc = self.db.get_notification(notification_id)
        self.assertEqual(doc["createdAt"], 1700000000000)
        self.assertFalse(doc["read"])
        self.assertEqual(doc["jobId"], "job1")
        self.assertNotIn("withdrawalId", doc)

    def test_get_notification_round_trips_dataclass(self):
        notification_id = notifications.create_notification(
            self.db,
            Notification(
                user_id="u1",
                type=NotificationType.WALLET_CREDITED,
                title="Wallet Credited",
                message="₹100 has been added to your wallet.",
                amount=100,
            ),
        )

        notification = notifications.get_notification(self.db, notification_id)

        self.assertEqual(notification.type, NotificationType.WALLET_CREDITED)
        self.assertEqual(notification.amount, 100.0)
        self.assertIsNone(notifications.get_notification(self.db, "missing"))

    def test_mark_read_only_for_owner(self):
        notification_id = self.db.add_notification({"userId": "u1", "read": False})

        with self.assertRaises(LookupError):
            notifications.mark_notification_as_read(self.db, "u2", notification_id)
        notifications.mark_notification_as_read(self.db, "u1", notification_id)

        self.assertTrue(self.db.get_notification(notification_id)["read"])

    def test_mark_all_as_read_skips_read_ones(self):
        self.db.add_notification({"userId": "u1", "read": False})
        self.db.add_notification({"userId": "u1", "read": True})
        self.db.add_notification({"userId": "u2", "read": False})

        self.assertEqual(notifications.mark_all_notifications_as_read(self.db, "u1"), 1)
        self.assertEqual(notifications.mark_all_notifications_as_read(self.db, "u1"), 0)

    def test_build_push_message(self):
        message = notifications.build_push_message(
            "token-1", "Hi", "There", {"jobId": "job1", "amount": 500, "missing": None}
        )

        self.assertEqual(message.token, "token-1")
        self.assertEqual(
            message.data,
            {"jobId": "job1", "amount": "500", "title": "Hi", "body": "There"},
        )
        self.assertEqual(message.android.priority, "high")
        self.assertEqual(message.android.notification.channel_id, "needyou_notifications")
        self.assertEqual(
            message.android.notification.click_action, "FLUTTER_NOTIFICATION_CLICK"
        )
        self.assertEqual(message.android.notification.sound, "default")


if __name__ == "__main__":
    unittest.main()
