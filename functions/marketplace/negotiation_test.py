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

from backend.db import InMemoryDbClient
from marketplace import negotiation
from shared.constants import JOB_APPLICATIONS_COLLECTION


class NegotiationTest(unittest.TestCase):

    def setUp(self):
        self.db = InMemoryDbClient()
        self.db.seed(
            JOB_APPLICATIONS_COLLECTION,
            "app1",
            {"jobId": "job1", "userId": "worker", "counterOffer": 800, "appliedAt": 42},
        )

    def _application(self):
        return self.db.get_application("app1")

    def test_first_round_seeds_initial_counter_offer(self):
        negotiation.renegotiate_budget(self.db, "app1", "job1", "Paint", 700, "Meet me")

        history = self._application()["negotiationHistory"]
        self.assertEqual(
            [(h["amount"], h["offeredBy"]) for h in history],
            [(800, "applicant"), (700, "poster")],
        )
        self.assertEqual(history[0]["offeredAt"], 42)
        self.assertEqual(history[0]["message"], "Initial counter-offer")
        self.assertEqual(history[1]["message"], "Meet me")

    def test_later_rounds_append(self):
        negotiation.renegotiate_budget(self.db, "app1", "job1", "Paint", 700)
        negotiation.respond_to_renegotiation(
            self.db, "app1", "job1", "Paint", "poster", accept=False, counter_offer=760
        )
        negotiation.renegotiate_budget(self.db, "app1", "job1", "Paint", 740)

        application = self._application()
        self.assertEqual(
            [h["amount"] for h in application["negotiationHistory"]], [800, 700, 760, 740]
        )
        self.assertNotIn("message", application["negotiationHistory"][1])
        self.assertEqual(application["currentOffer"], 740)
        self.assertEqual(application["counterOffer"], 760)
        self.assertEqual(application["negotiationStatus"], "ongoing")
        self.assertFalse(application["budgetSatisfied"])

    def test_accepting_falls_back_to_counter_offer(self):
        negotiation.respond_to_renegotiation(
            self.db, "app1", "job1", "Paint", "poster", accept=True
        )

        application = self._application()
        self.assertEqual(application["currentOffer"], 800)
        self.assertEqual(application["negotiationStatus"], "accepted")
        _, notification = self.db.list_notifications("poster")[0]
        self.assertEqual(
            notification["message"], 'Applicant accepted your offer of ₹800 for "Paint"'
        )

    def test_invalid_offers(self):
        with self.assertRaises(ValueError):
            negotiation.renegotiate_budget(self.db, "app1", "job1", "Paint", 0)
        with self.assertRaises(ValueError):
            negotiation.respond_to_renegotiation(
                self.db, "app1", "job1", "Paint", "poster", accept=False
            )

    def test_accept_without_counter_offer(self):
        self.db.seed(
            JOB_APPLICATIONS_COLLECTION, "app2", {"jobId": "job1", "userId": "worker"}
        )
        with self.assertRaises(ValueError):
            negotiation.accept_counter_offer(self.db, "app2", "job1", "Paint")

    def test_missing_application(self):
        with self.assertRaisesRegex(LookupError, "Application not found"):
            negotiation.accept_counter_offer(self.db, "nope", "job1", "Paint")


if __name__ == "__main__":
    unittest.main()
