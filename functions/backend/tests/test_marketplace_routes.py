import io
import unittest

from backend.testing import create_test_client
from shared.constants import JOB_APPLICATIONS_COLLECTION, JOBS_COLLECTION
from shared.types import UserRole

BANGALORE = {"latitude": 12.9716, "longitude": 77.5946, "city": "Bengaluru"}


class AuthTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()

    def test_missing_token_is_401(self):
        response = self.client.get("/api/notifications")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Missing bearer token"})

    def test_invalid_token_is_401(self):
        response = self.client.get(
            "/api/notifications", headers={"Authorization": "Bearer nope"}
        )
        self.assertEqual(response.status_code, 401)

    def test_role_is_enforced(self):
        headers = self.backends.add_user("u1", profile={})
        response = self.client.get("/api/wallet/withdrawals", headers=headers)
        self.assertEqual(response.status_code, 403)

    def test_admin_passes_accountant_check(self):
        headers = self.backends.add_user("boss", role=UserRole.ADMIN)
        response = self.client.get("/api/wallet/withdrawals", headers=headers)
        self.assertEqual(response.status_code, 200)


class PublicHelperTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()

    def test_validate_password(self):
        response = self.client.post("/api/validate-password", json={"password": "weakpass"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "isValid": False,
                "errors": {
                    "length": False,
                    "uppercase": True,
                    "lowercase": False,
                    "number": True,
                },
                "strength": "weak",
                "color": "#ef4444",
            },
        )

    def test_strong_password(self):
        response = self.client.post(
            "/api/validate-password", json={"password": "Str0ngPass"}
        )
        self.assertTrue(response.json()["isValid"])
        self.assertEqual(response.json()["strength"], "strong")

    def test_check_phone(self):
        self.backends.add_user("u1", profile={"phoneNumber": "+919876543210"})

        taken = self.client.post(
            "/api/users/check-phone", json={"phoneNumber": "98765 43210"}
        )
        self.assertEqual(taken.json(), {"exists": True})

        own = self.client.post(
            "/api/users/check-phone",
            json={"phoneNumber": "9876543210", "excludeUserId": "u1"},
        )
        self.assertEqual(own.json(), {"exists": False})


class ProfileRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.headers = self.backends.add_user("u1", email="Asha@Example.com")

    def test_create_profile(self):
        response = self.client.post(
            "/api/users", json={"name": " Asha "}, headers=self.headers
        )
        self.assertEqual(response.status_code, 201)
        profile = self.backends.db.get_user("u1")
        self.assertEqual(profile["name"], "Asha")
        self.assertEqual(profile["email"], "asha@example.com")
        self.assertEqual(profile["walletBalance"], 0)
        self.assertFalse(profile["onboardingComplete"])

        again = self.client.post("/api/users", json={"name": "Asha"}, headers=self.headers)
        self.assertEqual(again.status_code, 409)

    def test_onboarding_flow(self):
        self.client.post("/api/users", json={"name": "Asha"}, headers=self.headers)

        education = self.client.put(
            "/api/users/me/education",
            json={
                "degree": "B.Tech",
                "fieldOfStudy": "Civil",
                "institution": "VTU",
                "graduationYear": 2020,
            },
            headers=self.headers,
        )
        self.assertEqual(education.status_code, 200)
        location = self.client.put(
            "/api/users/me/location", json=BANGALORE, headers=self.headers
        )
        self.assertEqual(location.status_code, 200)
        done = self.client.post("/api/users/me/onboarding/complete", headers=self.headers)
        self.assertEqual(done.status_code, 200)

        status = self.client.get("/api/users/me/onboarding", headers=self.headers).json()
        self.assertTrue(status["onboardingComplete"])
        self.assertEqual(status["education"]["fieldOfStudy"], "Civil")
        self.assertEqual(status["location"]["city"], "Bengaluru")
        self.assertEqual(status["location"]["state"], "Unknown")

    def test_update_before_profile_exists_is_404(self):
        response = self.client.put(
            "/api/users/me/address", json={"address": "MG Road"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 404)

    def test_verification_status(self):
        self.client.post("/api/users", json={"name": "Asha"}, headers=self.headers)
        response = self.client.get("/api/users/me/verification", headers=self.headers)
        self.assertEqual(
            response.json(),
            {"emailVerified": False, "phoneVerified": False, "profileComplete": False},
        )

    def test_add_phone(self):
        self.client.post("/api/users", json={"name": "Asha"}, headers=self.headers)
        response = self.client.post(
            "/api/users/me/phone", json={"phoneNumber": "98765-43210"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["phoneNumber"], "+919876543210")
        profile = self.backends.db.get_user("u1")
        self.assertTrue(profile["phoneVerified"])
        self.assertTrue(profile["profileComplete"])

    def test_add_phone_in_use_is_409(self):
        self.backends.add_user("u2", profile={"phoneNumber": "+919876543210"})
        self.client.post("/api/users", json={"name": "Asha"}, headers=self.headers)
        response = self.client.post(
            "/api/users/me/phone", json={"phoneNumber": "9876543210"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 409)


class AddressRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.headers = self.backends.add_user("u1", profile={"savedAddresses": []})

    def _add(self, **overrides):
        body = {
            "type": "home",
            "houseNumber": "12B",
            "detailedAddress": "MG Road",
            "location": BANGALORE,
            **overrides,
        }
        return self.client.post("/api/users/me/addresses", json=body, headers=self.headers)

    def test_add_default_address_sets_primary_location(self):
        first = self._add()
        self.assertEqual(first.status_code, 201)
        self.assertTrue(first.json()["id"].startswith("addr_"))

        self._add(type="office", houseNumber="4", detailedAddress="Tech Park", isDefault=True)

        profile = self.backends.db.get_user("u1")
        self.assertEqual(profile["address"], "Office: 4, Tech Park")
        self.assertEqual(profile["location"]["latitude"], BANGALORE["latitude"])
        addresses = self.client.get("/api/users/me/addresses", headers=self.headers).json()
        self.assertEqual([a["isDefault"] for a in addresses], [False, True])

    def test_set_default_and_delete(self):
        address_id = self._add().json()["id"]
        self._add(isDefault=True)

        response = self.client.post(
            f"/api/users/me/addresses/{address_id}/default", headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["isDefault"])

        deleted = self.client.delete(
            f"/api/users/me/addresses/{address_id}", headers=self.headers
        )
        self.assertEqual(deleted.status_code, 204)
        self.assertEqual(len(self.backends.db.get_user("u1")["savedAddresses"]), 1)

    def test_update_address(self):
        address_id = self._add().json()["id"]
        response = self.client.patch(
            f"/api/users/me/addresses/{address_id}",
            json={"label": "Mom's place", "id": "hijack"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["label"], "Mom's place")
        self.assertEqual(response.json()["id"], address_id)

    def test_unknown_address_is_404(self):
        response = self.client.delete("/api/users/me/addresses/nope", headers=self.headers)
        self.assertEqual(response.status_code, 404)


class ReviewRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.worker_headers = self.backends.add_user("worker", profile={"reviews": []})
        self.poster_headers = self.backends.add_user(
            "poster", name="Ravi", profile={}
        )

    def test_review_updates_rating_and_notifies(self):
        for rating in (5, 4):
            response = self.client.post(
                "/api/users/worker/reviews",
                json={"rating": rating, "comment": "Good work", "jobId": "job1"},
                headers=self.poster_headers,
            )
            self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"rating": 4.5})

        notifications = self.backends.db.list_notifications("worker")
        self.assertEqual(len(notifications), 2)
        self.assertEqual(notifications[0][1]["type"], "review_received")

    def test_self_review_is_400(self):
        response = self.client.post(
            "/api/users/worker/reviews", json={"rating": 5}, headers=self.worker_headers
        )
        self.assertEqual(response.status_code, 400)

    def test_rating_out_of_range_is_400(self):
        response = self.client.post(
            "/api/users/worker/reviews", json={"rating": 6}, headers=self.poster_headers
        )
        self.assertEqual(response.status_code, 400)


class NotificationRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.headers = self.backends.add_user("u1", profile={})
        db = self.backends.db
        self.first = db.add_notification(
            {"userId": "u1", "title": "A", "message": "a", "read": False, "createdAt": 1}
        )
        self.second = db.add_notification(
            {"userId": "u1", "title": "B", "message": "b", "read": False, "createdAt": 2}
        )
        self.other = db.add_notification(
            {"userId": "u2", "title": "C", "message": "c", "read": False, "createdAt": 3}
        )

    def test_list_newest_first(self):
        response = self.client.get("/api/notifications", headers=self.headers)
        self.assertEqual([n["id"] for n in response.json()], [self.second, self.first])

    def test_mark_read(self):
        response = self.client.post(
            f"/api/notifications/{self.first}/read", headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(self.backends.db.get_notification(self.first)["read"])

    def test_cannot_mark_someone_elses_notification(self):
        response = self.client.post(
            f"/api/notifications/{self.other}/read", headers=self.headers
        )
        self.assertEqual(response.status_code, 404)
        self.assertFalse(self.backends.db.get_notification(self.other)["read"])

    def test_mark_all_read(self):
        response = self.client.post("/api/notifications/read-all", headers=self.headers)
        self.assertEqual(response.json(), {"updated": 2})
        again = self.client.post("/api/notifications/read-all", headers=self.headers)
        self.assertEqual(again.json(), {"updated": 0})


class NegotiationRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.poster_headers = self.backends.add_user("poster", profile={})
        self.worker_headers = self.backends.add_user("worker", profile={})
        db = self.backends.db
        db.seed(JOBS_COLLECTION, "job1", {"userId": "poster", "title": "Paint the wall"})
        db.seed(
            JOB_APPLICATIONS_COLLECTION,
            "app1",
            {"jobId": "job1", "userId": "worker", "counterOffer": 800, "appliedAt": 1},
        )

    def test_poster_counter_offer(self):
        response = self.client.post(
            "/api/applications/app1/counter-offer",
            json={"jobId": "job1", "newOffer": 700, "message": "Best I can do"},
            headers=self.poster_headers,
        )
        self.assertEqual(response.status_code, 200)

        application = self.backends.db.get_application("app1")
        self.assertEqual(application["currentOffer"], 700)
        self.assertEqual(application["offerBy"], "poster")
        self.assertEqual(
            [entry["amount"] for entry in application["negotiationHistory"]], [800, 700]
        )
        _, notification = self.backends.db.list_notifications("worker")[0]
        self.assertEqual(notification["type"], "counter_offer_received")
        self.assertEqual(
            notification["message"], 'Job poster offered ₹700 for "Paint the wall"'
        )

    def test_applicant_cannot_counter_as_poster(self):
        response = self.client.post(
            "/api/applications/app1/counter-offer",
            json={"jobId": "job1", "newOffer": 700},
            headers=self.worker_headers,
        )
        self.assertEqual(response.status_code, 403)

    def test_applicant_accepts(self):
        self.client.post(
            "/api/applications/app1/counter-offer",
            json={"jobId": "job1", "newOffer": 750},
            headers=self.poster_headers,
        )
        response = self.client.post(
            "/api/applications/app1/respond",
            json={"jobId": "job1", "accept": True},
            headers=self.worker_headers,
        )
        self.assertEqual(response.status_code, 200)

        application = self.backends.db.get_application("app1")
        self.assertEqual(application["negotiationStatus"], "accepted")
        self.assertEqual(application["currentOffer"], 750)
        self.assertTrue(application["budgetSatisfied"])
        _, notification = self.backends.db.list_notifications("poster")[0]
        self.assertEqual(notification["type"], "budget_accepted")

    def test_applicant_counter_requires_amount(self):
        response = self.client.post(
            "/api/applications/app1/respond",
            json={"jobId": "job1", "accept": False},
            headers=self.worker_headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_applicant_counters_and_poster_accepts(self):
        response = self.client.post(
            "/api/applications/app1/respond",
            json={"jobId": "job1", "accept": False, "counterOffer": 780},
            headers=self.worker_headers,
        )
        self.assertEqual(response.status_code, 200)
        _, notification = self.backends.db.list_notifications("poster")[0]
        self.assertEqual(notification["type"], "applicant_counter_offer")

        accepted = self.client.post(
            "/api/applications/app1/accept",
            json={"jobId": "job1"},
            headers=self.poster_headers,
        )
        self.assertEqual(accepted.status_code, 200)
        application = self.backends.db.get_application("app1")
        self.assertEqual(application["currentOffer"], 780)
        self.assertEqual(application["negotiationStatus"], "accepted")

    def test_unknown_application_is_404(self):
        response = self.client.post(
            "/api/applications/nope/accept",
            json={"jobId": "job1"},
            headers=self.poster_headers,
        )
        self.assertEqual(response.status_code, 404)

    def test_application_for_other_job_is_400(self):
        self.backends.db.seed(JOBS_COLLECTION, "job2", {"userId": "poster", "title": "X"})
        response = self.client.post(
            "/api/applications/app1/accept",
            json={"jobId": "job2"},
            headers=self.poster_headers,
        )
        self.assertEqual(response.status_code, 400)


class WalletRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.headers = self.backends.add_user(
            "u1", email="asha@example.com", name="Asha", profile={"walletBalance": 1000}
        )
        self.accountant_headers = self.backends.add_user(
            "acct", role=UserRole.ACCOUNTANT
        )
        self.admin_headers = self.backends.add_user("boss", role=UserRole.ADMIN)

    def _withdraw(self, amount=500, method=None):
        method = method or {"type": "upi", "upiId": "asha@okaxis"}
        return self.client.post(
            "/api/wallet/withdrawals",
            json={"amount": amount, "method": method},
            headers=self.headers,
        )

    def test_request_withdrawal_debits_wallet(self):
        response = self._withdraw()
        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertEqual(payload["amount"], 500)
        self.assertEqual(payload["platformFee"], 50)
        self.assertEqual(payload["payoutAmount"], 450)
        self.assertEqual(payload["status"], "pending")
        self.assertEqual(self.backends.db.get_user("u1")["walletBalance"], 500)

    def test_bank_withdrawal(self):
        response = self._withdraw(
            method={
                "type": "bank",
                "bankId": "sbi",
                "accountHolderName": "Asha K",
                "accountNumber": "123456789012",
                "confirmAccountNumber": "123456789012",
                "ifsc": "sbin0001234",
            }
        )
        self.assertEqual(response.status_code, 201)
        request = self.backends.db.get_withdrawal(response.json()["id"])
        self.assertEqual(request["method"]["ifsc"], "SBIN0001234")
        self.assertNotIn("upiId", request["method"])

    def test_bank_ifsc_must_match_bank(self):
        response = self._withdraw(
            method={
                "type": "bank",
                "bankId": "hdfc",
                "accountHolderName": "Asha K",
                "accountNumber": "123456789012",
                "ifsc": "SBIN0001234",
            }
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('must start with "HDFC"', response.json()["error"])

    def test_account_number_mismatch(self):
        response = self._withdraw(
            method={
                "type": "bank",
                "bankId": "sbi",
                "accountHolderName": "Asha K",
                "accountNumber": "123456789012",
                "confirmAccountNumber": "123456789013",
                "ifsc": "SBIN0001234",
            }
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Account numbers do not match."})

    def test_insufficient_balance(self):
        response = self._withdraw(amount=5000)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.backends.db.get_user("u1")["walletBalance"], 1000)

    def test_below_minimum(self):
        response = self._withdraw(amount=50)
        self.assertEqual(response.status_code, 400)

    def test_approve_withdrawal(self):
        request_id = self._withdraw().json()["id"]

        missing_txn = self.client.post(
            f"/api/wallet/withdrawals/{request_id}/approve",
            json={"transactionId": "  "},
            headers=self.accountant_headers,
        )
        self.assertEqual(missing_txn.status_code, 400)

        response = self.client.post(
            f"/api/wallet/withdrawals/{request_id}/approve",
            json={"transactionId": "UTR123"},
            headers=self.accountant_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "approved")
        self.assertEqual(response.json()["processedBy"], "acct")

        again = self.client.post(
            f"/api/wallet/withdrawals/{request_id}/approve",
            json={"transactionId": "UTR123"},
            headers=self.accountant_headers,
        )
        self.assertEqual(again.status_code, 409)

        _, notification = self.backends.db.list_notifications("u1")[0]
        self.assertEqual(notification["type"], "withdrawal_approved")
        self.assertIn("UTR123", notification["message"])

    def test_reject_withdrawal_refunds(self):
        request_id = self._withdraw().json()["id"]
        response = self.client.post(
            f"/api/wallet/withdrawals/{request_id}/reject",
            json={"reason": "Name mismatch"},
            headers=self.accountant_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["rejectionReason"], "Name mismatch")
        self.assertEqual(self.backends.db.get_user("u1")["walletBalance"], 1000)

    def test_list_withdrawals_by_status(self):
        first = self._withdraw().json()["id"]
        self._withdraw(amount=200)
        self.client.post(
            f"/api/wallet/withdrawals/{first}/reject",
            json={},
            headers=self.accountant_headers,
        )

        pending = self.client.get(
            "/api/wallet/withdrawals",
            params={"status": "pending"},
            headers=self.accountant_headers,
        ).json()
        self.assertEqual([r["amount"] for r in pending], [200])

        everything = self.client.get(
            "/api/wallet/withdrawals", headers=self.accountant_headers
        ).json()
        self.assertEqual(len(everything), 2)

    def test_unknown_withdrawal_is_404(self):
        response = self.client.post(
            "/api/wallet/withdrawals/nope/reject", json={}, headers=self.accountant_headers
        )
        self.assertEqual(response.status_code, 404)

    def test_admin_credit(self):
        response = self.client.post(
            "/api/admin/wallet/credit",
            json={"email": " ASHA@example.com ", "amount": 250},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"uid": "u1", "name": "Asha", "email": "asha@example.com", "balance": 1250},
        )
        _, notification = self.backends.db.list_notifications("u1")[0]
        self.assertEqual(notification["type"], "wallet_credited")

    def test_non_finite_amounts_are_rejected(self):
        for literal in ("NaN", "1e999"):
            withdrawal = self.client.post(
                "/api/wallet/withdrawals",
                content=(
                    f'{{"amount": {literal}, '
                    '"method": {"type": "upi", "upiId": "asha@okaxis"}}'
                ),
                headers={**self.headers, "Content-Type": "application/json"},
            )
            self.assertEqual(withdrawal.status_code, 400)
            self.assertIn("amount", withdrawal.json()["error"])

            credit = self.client.post(
                "/api/admin/wallet/credit",
                content=f'{{"email": "asha@example.com", "amount": {literal}}}',
                headers={**self.admin_headers, "Content-Type": "application/json"},
            )
            self.assertEqual(credit.status_code, 400)

        self.assertEqual(self.backends.db.get_user("u1")["walletBalance"], 1000)
        self.assertEqual(self.backends.db.list_withdrawals(), [])

    def test_admin_credit_unknown_email(self):
        response = self.client.post(
            "/api/admin/wallet/credit",
            json={"email": "ghost@example.com", "amount": 250},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 404)

    def test_accountant_cannot_credit(self):
        response = self.client.post(
            "/api/admin/wallet/credit",
            json={"email": "asha@example.com", "amount": 250},
            headers=self.accountant_headers,
        )
        self.assertEqual(response.status_code, 403)


class AccountantAdminRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.admin_headers = self.backends.add_user("boss", role=UserRole.ADMIN)
        self.backends.add_user("ravi", email="ravi@example.com", name="Ravi")

    def test_add_list_and_remove_accountant(self):
        added = self.client.post(
            "/api/admin/accountants",
            json={"email": "Ravi@example.com"},
            headers=self.admin_headers,
        )
        self.assertEqual(added.status_code, 201)
        self.assertEqual(added.json()["uid"], "ravi")
        self.assertEqual(added.json()["name"], "Ravi")
        self.assertEqual(self.backends.identity.roles["ravi"], UserRole.ACCOUNTANT)

        listed = self.client.get("/api/admin/accountants", headers=self.admin_headers)
        self.assertEqual([a["uid"] for a in listed.json()], ["ravi"])

        removed = self.client.delete(
            "/api/admin/accountants/ravi", headers=self.admin_headers
        )
        self.assertEqual(removed.status_code, 204)
        self.assertEqual(self.backends.identity.roles["ravi"], UserRole.USER)

        again = self.client.delete(
            "/api/admin/accountants/ravi", headers=self.admin_headers
        )
        self.assertEqual(again.status_code, 404)

    def test_add_unknown_account_is_404(self):
        response = self.client.post(
            "/api/admin/accountants",
            json={"email": "ghost@example.com"},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 404)


class GeocodingRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.headers = self.backends.add_user("u1")
        self.backends.geocoder.places[(12.9716, 77.5946)] = [
            {"long_name": "Indiranagar", "types": ["sublocality_level_1"]},
            {"long_name": "Bengaluru", "types": ["locality"]},
            {"long_name": "Karnataka", "types": ["administrative_area_level_1"]},
            {"long_name": "India", "types": ["country"]},
        ]
        self.backends.geocoder.addresses["MG Road, Bengaluru"] = (12.9756, 77.6050)

    def test_reverse_geocode(self):
        response = self.client.post(
            "/api/geocode/reverse",
            json={"latitude": 12.9716, "longitude": 77.5946},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "latitude": 12.9716,
                "longitude": 77.5946,
                "area": "Indiranagar",
                "city": "Bengaluru",
                "state": "Karnataka",
                "country": "India",
            },
        )

    def test_reverse_geocode_not_found(self):
        response = self.client.post(
            "/api/geocode/reverse",
            json={"latitude": 0, "longitude": 0},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 404)

    def test_geocode_address(self):
        response = self.client.post(
            "/api/geocode/address",
            json={"address": "MG Road, Bengaluru"},
            headers=self.headers,
        )
        self.assertEqual(response.json(), {"lat": 12.9756, "lng": 77.6050})


class MediaRoutesTests(unittest.TestCase):
    def setUp(self):
        self.client, self.backends = create_test_client()
        self.headers = self.backends.add_user("u1")

    def test_upload_video_adds_thumbnail(self):
        response = self.client.post(
            "/api/media/upload",
            files={"file": ("clip.mp4", io.BytesIO(b"video-bytes"), "video/mp4")},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertEqual(payload["resourceType"], "video")
        self.assertEqual(payload["publicId"], "needyou/jobs/clip_1")
        self.assertTrue(payload["thumbnailUrl"].endswith("/needyou/jobs/clip_1.jpg"))
        self.assertEqual(
            self.backends.storage.stored_objects["needyou/jobs/clip_1"], b"video-bytes"
        )

    def test_upload_rejects_other_types(self):
        response = self.client.post(
            "/api/media/upload",
            files={"file": ("notes.txt", io.BytesIO(b"hi"), "text/plain")},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_media_url(self):
        response = self.client.get(
            "/api/media/url", params={"publicId": "needyou/jobs/a", "width": 200}
        )
        self.assertEqual(
            response.json()["url"],
            "https://res.cloudinary.com/needyou-test/image/upload/q_auto,w_200,c_fill/needyou/jobs/a",
        )

        video = self.client.get(
            "/api/media/url", params={"publicId": "needyou/jobs/v", "kind": "video"}
        )
        self.assertEqual(
            video.json()["url"],
            "https://res.cloudinary.com/needyou-test/video/upload/needyou/jobs/v",
        )


if __name__ == "__main__":
    unittest.main()
