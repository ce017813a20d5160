import unittest

from backend.db import InMemoryDbClient
from backend.identity import AccountRecord, InMemoryIdentityProvider, UnknownAccountError
from scripts.grant_role import grant_role
from shared.types import UserRole


class GrantRoleTests(unittest.TestCase):
    def setUp(self):
        self.identity = InMemoryIdentityProvider()
        self.identity.accounts["ravi@example.com"] = AccountRecord(
            uid="u2", email="ravi@example.com", display_name="Ravi"
        )
        self.db = InMemoryDbClient()

    def test_grant_admin(self):
        uid = grant_role(self.identity, self.db, " Ravi@Example.com ", UserRole.ADMIN)
        self.assertEqual(uid, "u2")
        self.assertEqual(self.identity.roles["u2"], UserRole.ADMIN)
        self.assertEqual(self.db.list_accountants(), [])

    def test_accountant_is_listed_until_demoted(self):
        grant_role(self.identity, self.db, "ravi@example.com", UserRole.ACCOUNTANT)
        [(uid, doc)] = self.db.list_accountants()
        self.assertEqual(uid, "u2")
        self.assertEqual(doc["name"], "Ravi")

        grant_role(self.identity, self.db, "ravi@example.com", UserRole.USER)
        self.assertEqual(self.db.list_accountants(), [])
        self.assertEqual(self.identity.roles["u2"], UserRole.USER)

    def test_unknown_account(self):
        with self.assertRaises(UnknownAccountError):
            grant_role(self.identity, self.db, "ghost@example.com", UserRole.ADMIN)


if __name__ == "__main__":
    unittest.main()
