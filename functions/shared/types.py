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

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional


class NotificationType(StrEnum):
    NEARBY_JOB = "nearby_job"
    COUNTER_OFFER_RECEIVED = "counter_offer_received"
    APPLICANT_COUNTER_OFFER = "applicant_counter_offer"
    BUDGET_ACCEPTED = "budget_accepted"
    WITHDRAWAL_APPROVED = "withdrawal_approved"
    WITHDRAWAL_REJECTED = "withdrawal_rejected"
    WALLET_CREDITED = "wallet_credited"
    REVIEW_RECEIVED = "review_received"


class WithdrawalStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMethodType(StrEnum):
    BANK = "bank"
    UPI = "upi"


class OfferParty(StrEnum):
    APPLICANT = "applicant"
    POSTER = "poster"


class NegotiationStatus(StrEnum):
    ONGOING = "ongoing"
    ACCEPTED = "accepted"


class AddressType(StrEnum):
    HOME = "home"
    OFFICE = "office"
    OTHER = "other"


class UserRole(StrEnum):
    USER = "user"
    ACCOUNTANT = "accountant"
    ADMIN = "admin"


class PasswordStrength(StrEnum):
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


@dataclass
class Location:
    latitude: float
    longitude: float
    city: str = "Unknown"
    state: str = "Unknown"
    country: str = "Unknown"
    area: Optional[str] = None


@dataclass
class Education:
    degree: str
    field_of_study: str
    institution: str
    graduation_year: int


@dataclass
class Employment:
    status: str
    company: Optional[str] = None
    position: Optional[str] = None
    experience_years: Optional[int] = None


@dataclass
class SavedAddress:
    id: str
    type: AddressType
    label: str
    house_number: str
    detailed_address: str
    location: Location
    is_default: bool
    created_at: int


@dataclass
class Notification:
    """A notification document; creating one triggers a push."""

    user_id: str
    type: NotificationType
    title: str
    message: str
    created_at: int = 0
    read: bool = False
    job_id: Optional[str] = None
    job_title: Optional[str] = None
    application_id: Optional[str] = None
    amount: Optional[float] = None
    distance: Optional[float] = None
    withdrawal_id: Optional[str] = None


@dataclass
class NegotiationOffer:
    amount: float
    offered_by: OfferParty
    offered_at: int
    message: Optional[str] = None


@dataclass
class WithdrawalMethod:
    type: PaymentMethodType
    bank_id: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc: Optional[str] = None
    upi_id: Optional[str] = None


@dataclass
class WithdrawalRequest:
    uid: str
    user_name: str
    amount: float
    platform_fee: float
    payout_amount: float
    method: WithdrawalMethod
    status: WithdrawalStatus = WithdrawalStatus.PENDING
    created_at: int = 0
    processed_at: Optional[int] = None
    processed_by: Optional[str] = None
    transaction_id: Optional[str] = None
    rejection_reason: Optional[str] = None


@dataclass
class Review:
    reviewer_id: str
    reviewer_name: str
    rating: int
    comment: str = ""
    job_id: Optional[str] = None
    created_at: int = 0


@dataclass
class Bank:
    id: str
    name: str
    ifsc_prefix: str


@dataclass
class PasswordErrors:
    length: bool
    uppercase: bool
    lowercase: bool
    number: bool


@dataclass
class PasswordValidation:
    is_valid: bool
    errors: PasswordErrors


@dataclass
class UserProfile:
    """Default shape of a freshly created user document."""

    uid: str
    email: str
    name: str
    phone_number: Optional[str] = None
    email_verified: bool = False
    phone_verified: bool = False
    created_at: str = ""
    profile_complete: bool = False
    onboarding_complete: bool = False
    education: Optional[Education] = None
    employment: Optional[Employment] = None
    location: Optional[Location] = None
    address: Optional[str] = None
    saved_addresses: List[SavedAddress] = field(default_factory=list)
    jobs_completed: int = 0
    services_offered: int = 0
    rating: float = 0
    reviews: List[Review] = field(default_factory=list)
    wallet_balance: float = 0
