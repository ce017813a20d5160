"""
Pydantic schemas for the NeedYou FastAPI backend.

The web client speaks camelCase JSON, so every model aliases its fields.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.constants import (
    MAX_NEGOTIATION_MESSAGE_LENGTH,
    MAX_REVIEW_COMMENT_LENGTH,
    MAX_TRANSLATION_TEXT_LENGTH,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Payments


class CreateOrderResponse(CamelModel):
    order_id: str
    amount: int
    currency: str


class FetchPaymentRequest(CamelModel):
    payment_id: Optional[str] = None


class FetchPaymentResponse(CamelModel):
    vpa: Optional[str] = None
    customer_name: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[str] = None
    status: Optional[str] = None
    method: Optional[str] = None


class VerifyUpiRequest(CamelModel):
    vpa: Optional[str] = None


# Auth e-mails


class GenerateVerificationLinkRequest(CamelModel):
    email: Optional[str] = None
    user_name: Optional[str] = None


class GeneratePasswordResetLinkRequest(CamelModel):
    email: Optional[str] = None


class SendVerificationEmailRequest(CamelModel):
    email: Optional[str] = None
    verification_link: Optional[str] = None
    user_name: Optional[str] = None


class SendPasswordResetRequest(CamelModel):
    email: Optional[str] = None
    reset_link: Optional[str] = None
    user_name: Optional[str] = None


class SendEmailResponse(CamelModel):
    success: bool
    message_id: Optional[str] = None


# Push


class SendNotificationRequest(CamelModel):
    user_id: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    data: Optional[dict] = None


# Translation


class TranslateRequest(CamelModel):
    text: Optional[str] = Field(default=None, max_length=MAX_TRANSLATION_TEXT_LENGTH)
    target_language: Optional[str] = None


class TranslateResponse(CamelModel):
    translated_text: str
    detected_language: str
    target_language: str
    cached: bool


class DetectLanguageRequest(CamelModel):
    text: Optional[str] = Field(default=None, max_length=MAX_TRANSLATION_TEXT_LENGTH)


class DetectLanguageResponse(CamelModel):
    detected_language: str


# Validation helpers


class ValidatePasswordRequest(CamelModel):
    password: str


class PasswordErrorsModel(CamelModel):
    length: bool
    uppercase: bool
    lowercase: bool
    number: bool


class ValidatePasswordResponse(CamelModel):
    is_valid: bool
    errors: PasswordErrorsModel
    strength: str
    color: str


class CheckPhoneRequest(CamelModel):
    phone_number: str = Field(..., min_length=10, max_length=16)
    exclude_user_id: Optional[str] = None


class CheckPhoneResponse(CamelModel):
    exists: bool


# Users


class CreateProfileRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class EducationPayload(CamelModel):
    degree: str
    field_of_study: str
    institution: str
    graduation_year: int = Field(..., ge=1950, le=2100)


class EmploymentPayload(CamelModel):
    status: str
    company: Optional[str] = None
    position: Optional[str] = None
    experience_years: Optional[int] = Field(default=None, ge=0, le=80)


class LocationPayload(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    city: str = "Unknown"
    state: str = "Unknown"
    country: str = "Unknown"
    area: Optional[str] = None


class AddressTextPayload(CamelModel):
    address: str = Field(..., min_length=1, max_length=500)


class PhonePayload(CamelModel):
    phone_number: str = Field(..., min_length=10, max_length=16)


class SavedAddressPayload(CamelModel):
    type: Literal["home", "office", "other"]
    label: str = ""
    house_number: str
    detailed_address: str
    location: LocationPayload
    is_default: bool = False


class SavedAddressUpdate(CamelModel):
    type: Optional[Literal["home", "office", "other"]] = None
    label: Optional[str] = None
    house_number: Optional[str] = None
    detailed_address: Optional[str] = None
    location: Optional[LocationPayload] = None
    is_default: Optional[bool] = None


class AddressCreatedResponse(CamelModel):
    id: str


class ReviewPayload(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=MAX_REVIEW_COMMENT_LENGTH)
    job_id: Optional[str] = None


class ReviewResponse(CamelModel):
    rating: float


# Negotiation


class CounterOfferPayload(CamelModel):
    job_id: str
    new_offer: float = Field(..., gt=0, allow_inf_nan=False)
    message: Optional[str] = Field(default=None, max_length=MAX_NEGOTIATION_MESSAGE_LENGTH)


class RespondToOfferPayload(CamelModel):
    job_id: str
    accept: bool
    counter_offer: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    message: Optional[str] = Field(default=None, max_length=MAX_NEGOTIATION_MESSAGE_LENGTH)


class AcceptCounterOfferPayload(CamelModel):
    job_id: str


# Wallet


class WithdrawalMethodPayload(CamelModel):
    type: Literal["bank", "upi"]
    bank_id: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    confirm_account_number: Optional[str] = None
    ifsc: Optional[str] = None
    upi_id: Optional[str] = None


class WithdrawalPayload(CamelModel):
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    method: WithdrawalMethodPayload


class WithdrawalCreatedResponse(CamelModel):
    id: str
    amount: float
    platform_fee: float
    payout_amount: float
    status: str


class ApproveWithdrawalPayload(CamelModel):
    transaction_id: Optional[str] = None


class RejectWithdrawalPayload(CamelModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class CreditWalletPayload(CamelModel):
    email: str
    amount: float = Field(..., gt=0, allow_inf_nan=False)


class CreditWalletResponse(CamelModel):
    uid: str
    name: str
    email: Optional[str] = None
    balance: float


class AccountantPayload(CamelModel):
    email: str
    name: Optional[str] = None


# Geocoding and media


class ReverseGeocodePayload(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class GeocodeAddressPayload(CamelModel):
    address: str = Field(..., min_length=1)


class CoordinatesResponse(CamelModel):
    lat: float
    lng: float


class MediaUploadResponse(CamelModel):
    public_id: str
    secure_url: str
    resource_type: str
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    thumbnail_url: Optional[str] = None


class MediaUrlResponse(CamelModel):
    url: str
