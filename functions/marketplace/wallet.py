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
"""Wallet withdrawals, accountant settlement and admin top-ups."""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from marketplace.notifications import create_notification
from shared.constants import (
    DEFAULT_MIN_WITHDRAWAL_AMOUNT,
    DEFAULT_PLATFORM_FEE_PERCENT,
)
from shared.json_utils import to_document
from shared.types import (
    Notification,
    NotificationType,
    WithdrawalMethod,
    WithdrawalRequest,
    WithdrawalStatus,
)
from shared.utils import format_amount, now_ms
from shared.validation import validate_withdrawal_method

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def round_money(amount) -> float:
    if not math.isfinite(float(amount)):
        raise ValueError("Enter a valid amount.")
    return float(Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def calculate_platform_fee(
    amount: float, fee_percent: float = DEFAULT_PLATFORM_FEE_PERCENT
) -> Tuple[float, float]:
    """
    Splits a withdrawal into the platform fee and the payout.

    Returns:
        (fee, payout), both rounded half-up to two decimals. The payout is
        derived from the rounded fee so the two always sum to `amount`.
    """
    if not 0 <= fee_percent <= 100:
        raise ValueError("Platform fee must be between 0 and 100 percent.")
    gross = Decimal(str(amount))
    fee = (gross * Decimal(str(fee_percent)) / 100).quantize(
        _CENTS, rounding=ROUND_HALF_UP
    )
    return float(fee), float((gross - fee).quantize(_CENTS, rounding=ROUND_HALF_UP))


def request_withdrawal(
    db,
    uid: str,
    user_name: str,
    amount: float,
    method: WithdrawalMethod,
    fee_percent: float = DEFAULT_PLATFORM_FEE_PERCENT,
    min_amount: float = DEFAULT_MIN_WITHDRAWAL_AMOUNT,
) -> str:
    """
    Debits the wallet and files a pending withdrawal request.

    Raises:
        ValueError: For an invalid amount or payout method.
        InsufficientBalanceError: When the wallet cannot cover `amount`.
    """
    amount = round_money(amount)
    if amount <= 0:
        raise ValueError("Enter a valid amount.")
    if amount < min_amount:
        raise ValueError(f"Minimum withdrawal amount is ₹{min_amount:g}.")
    error = validate_withdrawal_method(method)
    if error:
        raise ValueError(error)
    if method.ifsc:
        method.ifsc = method.ifsc.upper()

    fee, payout = calculate_platform_fee(amount, fee_percent)
    request = WithdrawalRequest(
        uid=uid,
        user_name=user_name,
        amount=amount,
        platform_fee=fee,
        payout_amount=payout,
        method=method,
        created_at=now_ms(),
    )
    doc = to_document(request, drop_none=True)
    doc["method"] = {k: v for k, v in doc["method"].items() if v is not None}
    request_id = db.create_withdrawal(uid, doc)
    logger.info("Withdrawal %s of %.2f requested by %s", request_id, amount, uid)
    return request_id


def approve_withdrawal(
    db, request_id: str, transaction_id: str, accountant_uid: str
) -> dict:
    """Marks a pending request as paid out under the given bank/UPI TXN ID."""
    transaction_id = (transaction_id or "").strip()
    if not transaction_id:
        raise ValueError("A transaction ID is required to approve a withdrawal.")

    request = db.settle_withdrawal(
        request_id,
        {
            "status": WithdrawalStatus.APPROVED,
            "transactionId": transaction_id,
            "processedAt": now_ms(),
            "processedBy": accountant_uid,
        },
        refund=False,
    )
    create_notification(
        db,
        Notification(
            user_id=request["uid"],
            type=NotificationType.WITHDRAWAL_APPROVED,
            title="Withdrawal Approved",
            message=(
                f"₹{format_amount(request['payoutAmount'])} has been sent to you. "
                f"Transaction ID: {transaction_id}"
            ),
            amount=request["payoutAmount"],
            withdrawal_id=request_id,
        ),
    )
    logger.info("Withdrawal %s approved by %s", request_id, accountant_uid)
    return request


def reject_withdrawal(
    db, request_id: str, reason: str, accountant_uid: str
) -> dict:
    """Rejects a pending request and refunds the full amount to the wallet."""
    reason = (reason or "").strip()
    fields = {
        "status": WithdrawalStatus.REJECTED,
        "processedAt": now_ms(),
        "processedBy": accountant_uid,
    }
    if reason:
        fields["rejectionReason"] = reason

    request = db.settle_withdrawal(request_id, fields, refund=True)
    message = f"₹{format_amount(request['amount'])} has been refunded to your wallet."
    if reason:
        message = f"{message} Reason: {reason}"
    create_notification(
        db,
        Notification(
            user_id=request["uid"],
            type=NotificationType.WITHDRAWAL_REJECTED,
            title="Withdrawal Rejected",
            message=message,
            amount=request["amount"],
            withdrawal_id=request_id,
        ),
    )
    logger.info("Withdrawal %s rejected by %s", request_id, accountant_uid)
    return request


def credit_wallet(db, email: str, amount: float) -> dict:
    """
    Adds balance to the wallet of the user registered under `email`.

    Returns:
        dict with the user's uid, name, email and new balance.
    """
    amount = round_money(amount or 0)
    if amount <= 0:
        raise ValueError("Enter a valid amount.")
    email = (email or "").strip().lower()
    matches = db.find_users("email", email)
    if not matches:
        raise LookupError("No user found with that email.")

    uid, user = matches[0]
    db.increment_wallet(uid, amount)
    new_balance = round_money((user.get("walletBalance") or 0) + amount)
    create_notification(
        db,
        Notification(
            user_id=uid,
            type=NotificationType.WALLET_CREDITED,
            title="Wallet Credited",
            message=f"₹{format_amount(amount)} has been added to your wallet.",
            amount=amount,
        ),
    )
    logger.info("Credited %.2f to %s", amount, uid)
    return {
        "uid": uid,
        "name": user.get("name") or user.get("displayName") or "User",
        "email": user.get("email"),
        "balance": new_balance,
    }
