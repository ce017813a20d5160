import unittest
from unittest.mock import patch

from backend import dependencies
from backend.cache import InMemoryTranslationCache
from backend.db import InMemoryDbClient
from backend.payments import InMemoryPaymentGateway, RazorpayClient
from backend.storage import CloudinaryStorageClient, StorageError
from backend.testing import make_settings


class DependencyWiringTests(unittest.TestCase):
    def setUp(self):
        for name in ("_db_client", "_translation_cache", "_payment_gateway", "_storage_client"):
            patcher = patch.object(dependencies, name, None)
            patcher.start()
            self.addCleanup(patcher.stop)

    @patch("backend.dependencies.get_settings")
    def test_in_memory_backends(self, mock_settings):
        mock_settings.return_value = make_settings(redis_url="redis://localhost:6379/0")

        db = dependencies.get_db_client()
        self.assertIsInstance(db, InMemoryDbClient)
        self.assertIs(dependencies.get_db_client(), db)
        self.assertIsInstance(dependencies.get_translation_cache(), InMemoryTranslationCache)
        self.assertIsInstance(dependencies.get_payment_gateway(), InMemoryPaymentGateway)

    @patch("backend.dependencies.get_settings")
    def test_real_clients_when_configured(self, mock_settings):
        mock_settings.return_value = make_settings(
            use_in_memory_backends=False,
            razorpay_key_id="rzp_test",
            razorpay_key_secret="secret",
        )

        gateway = dependencies.get_payment_gateway()
        self.assertIsInstance(gateway, RazorpayClient)
        self.assertEqual(gateway.key_id, "rzp_test")
        self.assertIsInstance(dependencies.get_storage_client(), CloudinaryStorageClient)

    @patch("backend.dependencies.get_settings")
    def test_missing_cloudinary_config_is_not_replaced(self, mock_settings):
        mock_settings.return_value = make_settings(
            use_in_memory_backends=False, cloudinary_cloud_name=None
        )

        storage = dependencies.get_storage_client()

        self.assertIsInstance(storage, CloudinaryStorageClient)
        with self.assertRaises(StorageError):
            storage.optimized_image_url("needyou/jobs/a")


if __name__ == "__main__":
    unittest.main()
