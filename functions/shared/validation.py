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
"""Validation rules shared by the signup and wallet forms."""

import re
from typing import Dict, Optional

from shared.constants import (
    DEFAULT_COUNTRY_CODE,
    MIN_ACCOUNT_NUMBER_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from shared.types import (
    Bank,
    PasswordErrors,
    PasswordStrength,
    PasswordValidation,
    PaymentMethodType,
    WithdrawalMethod,
)

UPI_ID_PATTERN = re.compile(r"^[a-zA-Z0-9.\-_]+@[a-zA-Z]+$")
IFSC_PATTERN = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")

SUPPORTED_BANKS: Dict[str, Bank] = {
    bank.id: bank
    for bank in [
        Bank("axis", "Axis Bank", "UTIB"),
        Bank("bob", "Bank of Baroda", "BARB"),
        Bank("boi", "Bank of India", "BKID"),
        Bank("canara", "Canara Bank", "CNRB"),
        Bank("csb", "CSB Bank", "CSBK"),
        Bank("dbs", "DBS Bank India", "DBSS"),
        Bank("federal", "Federal Bank", "FDRL"),
        Bank("hdfc", "HDFC Bank", "HDFC"),
        Bank("hsbc", "HSBC India", "HSBC"),
        Bank("icici", "ICICI Bank", "ICIC"),
        Bank("idbi", "IDBI Bank", "IBKL"),
        Bank("idfc", "IDFC First Bank", "IDFB"),
        Bank("indusind", "IndusInd Bank", "INDB"),
        Bank("kotak", "Kotak Mahindra Bank", "KKBK"),
        Bank("pnb", "Punjab National Bank", "PUNB"),
        Bank("rbl", "RBL Bank", "RATN"),
        Bank("sbi", "State Bank of India", "SBIN"),
        Bank("sc", "Standard Chartered", "SCBL"),
        Bank("union", "Union Bank of India", "UBIN"),
        Bank("yes", "YES Bank", "YESB"),
    ]
}

_STRENGTH_COLORS = {
    PasswordStrength.WEAK: "#ef4444",
    PasswordStrength.MEDIUM: "#f59e0b",
    PasswordStrength.STRONG: "#10b981",
}


def validate_password(password: str) -> PasswordValidation:
    errors = PasswordErrors(
        length=len(password) < MIN_PASSWORD_LENGTH,
        uppercase=not re.search(r"[A-Z]", password),
        lowercase=not re.search(r"[a-z]", password),
        number=not re.search(r"\d", password),
    )
    is_valid = not (
        errors.length or errors.uppercase or errors.lowercase or errors.number
    )
    return PasswordValidation(is_valid=is_valid, errors=errors)


def get_password_strength(password: str) -> PasswordStrength:
    errors = validate_password(password).errors
    passed_checks = [
        errors.length,
        errors.uppercase,
        errors.lowercase,
        errors.number,
    ].count(False)

    if passed_checks <= 2:
        return PasswordStrength.WEAK
    if passed_checks == 3:
        return PasswordStrength.MEDIUM
    return PasswordStrength.STRONG


def get_password_strength_color(strength: PasswordStrength) -> str:
    return _STRENGTH_COLORS[strength]


def normalize_phone_number(phone_number: str) -> str:
    """Adds the Indian country code to bare 10-digit numbers."""
    phone_number = re.sub(r"[\s-]", "", phone_number or "")
    if phone_number.startswith("+"):
        return phone_number
    return DEFAULT_COUNTRY_CODE + phone_number


def validate_upi_id(upi_id: str) -> bool:
    return bool(UPI_ID_PATTERN.match((upi_id or "").strip()))


def validate_bank_method(
    bank_id: str,
    account_holder_name: str,
    account_number: str,
    confirm_account_number: Optional[str],
    ifsc: str,
) -> Optional[str]:
    """
    Checks a bank payout method.

    Returns:
        The first error message, or None when the method is valid.
    """
    bank = SUPPORTED_BANKS.get(bank_id or "")
    if not bank:
        return "Please select a bank."
    if not (account_holder_name or "").strip():
        return "Account holder name is required."
    if len(account_number or "") < MIN_ACCOUNT_NUMBER_LENGTH:
        return "Enter a valid account number."
    if confirm_account_number is not None and account_number != confirm_account_number:
        return "Account numbers do not match."
    ifsc = (ifsc or "").upper()
    if not IFSC_PATTERN.match(ifsc):
        return "Enter a valid IFSC code (e.g. SBIN0001234)."
    if not ifsc.startswith(bank.ifsc_prefix):
        return (
            f'IFSC code for {bank.name} must start with "{bank.ifsc_prefix}" '
            f"(e.g. {bank.ifsc_prefix}0001234)."
        )
    return None


def validate_withdrawal_method(method: WithdrawalMethod) -> Optional[str]:
    if method.type == PaymentMethodType.UPI:
        if not (method.upi_id or "").strip():
            return "UPI ID is required."
        if not validate_upi_id(method.upi_id):
            return "Enter a valid UPI ID (e.g. name@upi)."
        return None
    return validate_bank_method(
        method.bank_id,
        method.account_holder_name,
        method.account_number,
        None,
        method.ifsc,
    )
