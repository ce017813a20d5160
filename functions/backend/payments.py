"""
Payment gateway client used to verify a user's UPI ID before payouts.

The client only needs three Razorpay calls: create the ₹1 verification
order, fetch the captured payment, and validate a VPA directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

from shared.api import PaymentDetails, PaymentOrder, VpaValidation
from shared.constants import UPI_VERIFICATION_AMOUNT_PAISE, UPI_VERIFICATION_CURRENCY
from shared.utils import now_ms

logger = logging.getLogger(__name__)

RAZORPAY_API_BASE = "https://api.razorpay.com/v1"
REQUEST_TIMEOUT_SECONDS = 15


class PaymentGatewayError(Exception):
    """Raised when the gateway rejects a request or is unreachable."""


class PaymentGatewayNotConfiguredError(PaymentGatewayError):
    pass


class PaymentGateway(Protocol):
    def create_order(self) -> PaymentOrder:
        ...

    def fetch_payment(self, payment_id: str) -> PaymentDetails:
        ...

    def validate_vpa(self, vpa: str) -> VpaValidation:
        ...


def _error_description(response: requests.Response, fallback: str) -> str:
    try:
        error = response.json().get("error") or {}
    except ValueError:
        return fallback
    return error.get("description") or error.get("code") or fallback


@dataclass
class RazorpayClient:
    """Razorpay REST client authenticated with HTTP basic auth."""

    key_id: Optional[str]
    key_secret: Optional[str]
    base_url: str = RAZORPAY_API_BASE

    def _auth(self) -> tuple[str, str]:
        if not self.key_id or not self.key_secret:
            raise PaymentGatewayNotConfiguredError("Razorpay not configured")
        return self.key_id, self.key_secret

    def _request(self, method: str, path: str, fallback_error: str, **kwargs) -> dict:
        auth = self._auth()
        try:
            response = requests.request(
                method,
                f"{self.base_url}/{path}",
                auth=auth,
                timeout=REQUEST_TIMEOUT_SECONDS,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.exception("Razorpay request to %s failed", path)
            raise PaymentGatewayError(fallback_error) from e
        if not response.ok:
            description = _error_description(response, fallback_error)
            logger.warning("Razorpay %s %s -> %s: %s", method, path, response.status_code, description)
            raise PaymentGatewayError(description)
        return response.json()

    def create_order(self) -> PaymentOrder:
        """Creates the ₹1 (100 paise) order used for UPI verification."""
        data = self._request(
            "POST",
            "orders",
            "Failed to create order",
            json={
                "amount": UPI_VERIFICATION_AMOUNT_PAISE,
                "currency": UPI_VERIFICATION_CURRENCY,
                "receipt": f"upi_verify_{now_ms()}",
                "notes": {"purpose": "UPI ID verification"},
            },
        )
        return PaymentOrder(
            order_id=data["id"], amount=data["amount"], currency=data["currency"]
        )

    def fetch_payment(self, payment_id: str) -> PaymentDetails:
        data = self._request("GET", f"payments/{payment_id}", "Failed to fetch payment")
        return PaymentDetails(
            vpa=data.get("vpa") or None,
            customer_name=data.get("description") or None,
            email=data.get("email") or None,
            contact=data.get("contact") or None,
            status=data.get("status"),
            method=data.get("method"),
        )

    def validate_vpa(self, vpa: str) -> VpaValidation:
        """
        Validates a VPA with the gateway.

        A rejected VPA is reported as `success=False` rather than raised, the
        gateway answers 4xx for unknown handles.
        """
        try:
            data = self._request(
                "POST", "payments/validate/vpa", "VPA validation failed", json={"vpa": vpa}
            )
        except PaymentGatewayNotConfiguredError:
            raise
        except PaymentGatewayError as e:
            return VpaValidation(success=False, vpa=vpa, error=str(e))

        success = data.get("success") in (True, "true")
        return VpaValidation(
            success=success,
            vpa=data.get("vpa") or vpa,
            customer_name=data.get("customer_name") or None,
        )


@dataclass
class InMemoryPaymentGateway:
    """Test double returning canned gateway responses."""

    valid_vpas: dict[str, str] = field(default_factory=dict)
    payments: dict[str, PaymentDetails] = field(default_factory=dict)
    orders: list[PaymentOrder] = field(default_factory=list)

    def create_order(self) -> PaymentOrder:
        order = PaymentOrder(
            order_id=f"order_{len(self.orders) + 1}",
            amount=UPI_VERIFICATION_AMOUNT_PAISE,
            currency=UPI_VERIFICATION_CURRENCY,
        )
        self.orders.append(order)
        return order

    def fetch_payment(self, payment_id: str) -> PaymentDetails:
        payment = self.payments.get(payment_id)
        if payment is None:
            raise PaymentGatewayError("The id provided does not exist")
        return payment

    def validate_vpa(self, vpa: str) -> VpaValidation:
        if vpa not in self.valid_vpas:
            return VpaValidation(success=False, vpa=vpa, error="Invalid VPA. Please enter a valid Virtual Payment Address")
        return VpaValidation(success=True, vpa=vpa, customer_name=self.valid_vpas[vpa])
