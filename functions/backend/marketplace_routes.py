"""
Authenticated marketplace routes: profiles, addresses, reviews, notifications,
budget negotiation, wallet withdrawals, admin tools, geocoding and media.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from backend.auth import get_current_user, require_role
from backend.config import Settings, get_settings
from backend.db import ConflictError, DbClient
from backend.dependencies import (
    get_db_client,
    get_geocoding_client,
    get_identity_provider,
    get_storage_client,
)
from backend.geocoding import GeocodingClient, GeocodingError
from backend.identity import AuthenticatedUser, IdentityProvider
from backend.schemas import (
    AcceptCounterOfferPayload,
    AccountantPayload,
    AddressCreatedResponse,
    AddressTextPayload,
    ApproveWithdrawalPayload,
    CheckPhoneRequest,
    CheckPhoneResponse,
    CoordinatesResponse,
    CounterOfferPayload,
    CreateProfileRequest,
    CreditWalletPayload,
    CreditWalletResponse,
    EducationPayload,
    EmploymentPayload,
    GeocodeAddressPayload,
    LocationPayload,
    MediaUploadResponse,
    MediaUrlResponse,
    PhonePayload,
    RejectWithdrawalPayload,
    RespondToOfferPayload,
    ReverseGeocodePayload,
    ReviewPayload,
    ReviewResponse,
    SavedAddressPayload,
    SavedAddressUpdate,
    ValidatePasswordRequest,
    ValidatePasswordResponse,
    WithdrawalCreatedResponse,
    WithdrawalPayload,
)
from backend.storage import StorageClient, StorageError
from marketplace import negotiation, notifications, users, wallet
from shared.json_utils import convert_keys, to_document
from shared.types import (
    Education,
    Employment,
    Location,
    PaymentMethodType,
    Review,
    UserRole,
    WithdrawalMethod,
    WithdrawalStatus,
)
from shared.utils import now_ms
from shared.validation import (
    get_password_strength,
    get_password_strength_color,
    validate_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()

require_accountant = require_role(UserRole.ACCOUNTANT)
require_admin = require_role(UserRole.ADMIN)


@contextmanager
def domain_errors():
    """Translates domain exceptions into HTTP errors."""
    try:
        yield
    except (ConflictError, users.PhoneNumberInUseError) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _camel(model) -> dict:
    return model.model_dump(by_alias=True, exclude_none=True)


# Public helpers


@router.post("/validate-password", response_model=ValidatePasswordResponse)
def validate_password_route(payload: ValidatePasswordRequest):
    result = validate_password(payload.password)
    strength = get_password_strength(payload.password)
    return {
        "isValid": result.is_valid,
        "errors": asdict(result.errors),
        "strength": strength,
        "color": get_password_strength_color(strength),
    }


@router.post("/users/check-phone", response_model=CheckPhoneResponse)
def check_phone(payload: CheckPhoneRequest, db: DbClient = Depends(get_db_client)):
    exists = users.check_phone_number_exists(
        db, payload.phone_number, payload.exclude_user_id
    )
    return {"exists": exists}


# Profile and onboarding


@router.post("/users", status_code=201)
def create_profile(
    payload: CreateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    if db.get_user(user.uid) is not None:
        raise HTTPException(status_code=409, detail="Profile already exists")
    if not user.email:
        raise HTTPException(status_code=400, detail="Account has no email address")
    return users.create_user_profile(db, user.uid, user.email, payload.name)


@router.get("/users/me/verification")
def verification_status(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    status = users.get_verification_status(db, user.uid)
    if status is None:
        raise HTTPException(status_code=404, detail="User not found")
    return status


@router.get("/users/me/onboarding")
def onboarding_status(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    status = users.check_onboarding_status(db, user.uid)
    if status is None:
        raise HTTPException(status_code=404, detail="User not found")
    return status


@router.put("/users/me/education")
def put_education(
    payload: EducationPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        users.update_education(db, user.uid, Education(**payload.model_dump()))
    return {"success": True}


@router.put("/users/me/employment")
def put_employment(
    payload: EmploymentPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        users.update_employment(db, user.uid, Employment(**payload.model_dump()))
    return {"success": True}


@router.put("/users/me/location")
def put_location(
    payload: LocationPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        users.update_location(db, user.uid, Location(**payload.model_dump()))
    return {"success": True}


@router.put("/users/me/address")
def put_address(
    payload: AddressTextPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        users.update_user_address(db, user.uid, payload.address.strip())
    return {"success": True}


@router.post("/users/me/onboarding/complete")
def finish_onboarding(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        users.complete_onboarding(db, user.uid)
    return {"success": True}


@router.post("/users/me/phone")
def add_phone(
    payload: PhonePayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        phone_number = users.add_phone_to_user(db, user.uid, payload.phone_number)
    return {"success": True, "phoneNumber": phone_number}


# Saved addresses


@router.get("/users/me/addresses")
def list_addresses(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    return users.get_user_addresses(db, user.uid)


@router.post("/users/me/addresses", response_model=AddressCreatedResponse, status_code=201)
def create_address(
    payload: SavedAddressPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        address_id = users.add_user_address(db, user.uid, _camel(payload))
    return {"id": address_id}


@router.patch("/users/me/addresses/{address_id}")
def patch_address(
    address_id: str,
    payload: SavedAddressUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        return users.update_saved_address(db, user.uid, address_id, _camel(payload))


@router.delete("/users/me/addresses/{address_id}", status_code=204)
def remove_address(
    address_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        users.delete_address(db, user.uid, address_id)


@router.post("/users/me/addresses/{address_id}/default")
def make_default_address(
    address_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        return users.set_default_address(db, user.uid, address_id)


# Reviews


@router.post("/users/{uid}/reviews", response_model=ReviewResponse, status_code=201)
def review_user(
    uid: str,
    payload: ReviewPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    reviewer = db.get_user(user.uid) or {}
    review = Review(
        reviewer_id=user.uid,
        reviewer_name=reviewer.get("name") or user.name or "Anonymous",
        rating=payload.rating,
        comment=payload.comment.strip(),
        job_id=payload.job_id,
    )
    with domain_errors():
        rating = users.add_review(db, uid, review)
    return {"rating": rating}


# Notifications


@router.get("/notifications")
def list_notifications(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    return notifications.get_user_notifications(db, user.uid)


@router.post("/notifications/read-all")
def read_all_notifications(
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    updated = notifications.mark_all_notifications_as_read(db, user.uid)
    return {"updated": updated}


@router.post("/notifications/{notification_id}/read")
def read_notification(
    notification_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        notifications.mark_notification_as_read(db, user.uid, notification_id)
    return {"success": True}


# Budget negotiation


def _load_negotiation(db: DbClient, application_id: str, job_id: str) -> tuple[dict, dict]:
    application = db.get_application(application_id)
    if application is None:
        raise HTTPException(status_code=404, detail="Application not found")
    job = db.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    if application.get("jobId") != job_id:
        raise HTTPException(status_code=400, detail="Application does not belong to this job")
    return application, job


def _job_title(job: dict) -> str:
    return job.get("title") or job.get("caption") or "your job"


@router.post("/applications/{application_id}/counter-offer")
def poster_counter_offer(
    application_id: str,
    payload: CounterOfferPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    _, job = _load_negotiation(db, application_id, payload.job_id)
    if job.get("userId") != user.uid:
        raise HTTPException(status_code=403, detail="Only the job poster can renegotiate")
    with domain_errors():
        negotiation.renegotiate_budget(
            db,
            application_id,
            payload.job_id,
            _job_title(job),
            payload.new_offer,
            payload.message,
        )
    return {"success": True}


@router.post("/applications/{application_id}/respond")
def applicant_respond(
    application_id: str,
    payload: RespondToOfferPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    application, job = _load_negotiation(db, application_id, payload.job_id)
    if application.get("userId") != user.uid:
        raise HTTPException(status_code=403, detail="Only the applicant can respond")
    if not payload.accept and payload.counter_offer is None:
        raise HTTPException(status_code=400, detail="Counter-offer amount is required")
    with domain_errors():
        negotiation.respond_to_renegotiation(
            db,
            application_id,
            payload.job_id,
            _job_title(job),
            job["userId"],
            payload.accept,
            payload.counter_offer,
            payload.message,
        )
    return {"success": True}


@router.post("/applications/{application_id}/accept")
def poster_accept(
    application_id: str,
    payload: AcceptCounterOfferPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    _, job = _load_negotiation(db, application_id, payload.job_id)
    if job.get("userId") != user.uid:
        raise HTTPException(status_code=403, detail="Only the job poster can accept")
    with domain_errors():
        negotiation.accept_counter_offer(db, application_id, payload.job_id, _job_title(job))
    return {"success": True}


# Wallet


@router.post("/wallet/withdrawals", response_model=WithdrawalCreatedResponse, status_code=201)
def create_withdrawal(
    payload: WithdrawalPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    method = payload.method
    if (
        method.type == PaymentMethodType.BANK
        and method.confirm_account_number is not None
        and method.confirm_account_number != method.account_number
    ):
        raise HTTPException(status_code=400, detail="Account numbers do not match.")

    profile = db.get_user(user.uid)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")

    with domain_errors():
        request_id = wallet.request_withdrawal(
            db,
            user.uid,
            profile.get("name") or user.name or "User",
            payload.amount,
            WithdrawalMethod(**method.model_dump(exclude={"confirm_account_number"})),
            fee_percent=settings.platform_fee_percent,
            min_amount=settings.min_withdrawal_amount,
        )
    request = db.get_withdrawal(request_id)
    return {
        "id": request_id,
        "amount": request["amount"],
        "platformFee": request["platformFee"],
        "payoutAmount": request["payoutAmount"],
        "status": request["status"],
    }


@router.get("/wallet/withdrawals")
def list_withdrawals(
    status: Optional[WithdrawalStatus] = Query(default=None),
    _: AuthenticatedUser = Depends(require_accountant),
    db: DbClient = Depends(get_db_client),
):
    return [
        {"id": request_id, **doc}
        for request_id, doc in db.list_withdrawals(status.value if status else None)
    ]


@router.post("/wallet/withdrawals/{request_id}/approve")
def approve_withdrawal(
    request_id: str,
    payload: ApproveWithdrawalPayload,
    accountant: AuthenticatedUser = Depends(require_accountant),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        request = wallet.approve_withdrawal(
            db, request_id, payload.transaction_id, accountant.uid
        )
    return {"id": request_id, **request}


@router.post("/wallet/withdrawals/{request_id}/reject")
def reject_withdrawal(
    request_id: str,
    payload: RejectWithdrawalPayload,
    accountant: AuthenticatedUser = Depends(require_accountant),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        request = wallet.reject_withdrawal(db, request_id, payload.reason, accountant.uid)
    return {"id": request_id, **request}


# Admin


@router.post("/admin/wallet/credit", response_model=CreditWalletResponse)
def credit_wallet(
    payload: CreditWalletPayload,
    _: AuthenticatedUser = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    with domain_errors():
        return wallet.credit_wallet(db, payload.email, payload.amount)


@router.get("/admin/accountants")
def list_accountants(
    _: AuthenticatedUser = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
):
    return [doc for _, doc in db.list_accountants()]


@router.post("/admin/accountants", status_code=201)
def add_accountant(
    payload: AccountantPayload,
    _: AuthenticatedUser = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    with domain_errors():
        account = identity.get_user_by_email(payload.email.strip().lower())
    identity.set_role(account.uid, UserRole.ACCOUNTANT)
    doc = {
        "uid": account.uid,
        "name": (payload.name or account.display_name or "Accountant").strip(),
        "email": account.email,
        "createdAt": now_ms(),
    }
    db.add_accountant(account.uid, doc)
    logger.info("Granted accountant role to %s", account.uid)
    return doc


@router.delete("/admin/accountants/{uid}", status_code=204)
def remove_accountant(
    uid: str,
    _: AuthenticatedUser = Depends(require_admin),
    db: DbClient = Depends(get_db_client),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    if not db.delete_accountant(uid):
        raise HTTPException(status_code=404, detail="Accountant not found")
    identity.set_role(uid, UserRole.USER)
    logger.info("Revoked accountant role from %s", uid)


# Geocoding


@router.post("/geocode/reverse")
def reverse_geocode(
    payload: ReverseGeocodePayload,
    _: AuthenticatedUser = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
):
    try:
        with domain_errors():
            location = geocoder.reverse_geocode(payload.latitude, payload.longitude)
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return to_document(location, drop_none=True)


@router.post("/geocode/address", response_model=CoordinatesResponse)
def geocode_address(
    payload: GeocodeAddressPayload,
    _: AuthenticatedUser = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
):
    try:
        with domain_errors():
            lat, lng = geocoder.geocode_address(payload.address)
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return {"lat": lat, "lng": lng}


# Media


@router.post("/media/upload", response_model=MediaUploadResponse, status_code=201)
def upload_media(
    file: UploadFile = File(...),
    _: AuthenticatedUser = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage_client),
):
    content_type = file.content_type or "application/octet-stream"
    if not content_type.startswith(("image/", "video/")):
        raise HTTPException(status_code=400, detail="Only image and video uploads are supported")
    try:
        media = storage.upload(file.filename or "upload", file.file, content_type)
    except StorageError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return convert_keys(asdict(media), "snake_to_camel")


@router.get("/media/url", response_model=MediaUrlResponse)
def media_url(
    public_id: str = Query(..., alias="publicId"),
    kind: Literal["image", "video", "thumbnail"] = Query(default="image"),
    width: Optional[int] = Query(default=None, gt=0),
    height: Optional[int] = Query(default=None, gt=0),
    crop: Literal["fill", "fit", "scale", "thumb"] = Query(default="fill"),
    quality: str = Query(default="auto"),
    storage: StorageClient = Depends(get_storage_client),
):
    try:
        if kind == "video":
            url = storage.video_url(public_id)
        elif kind == "thumbnail":
            url = storage.video_thumbnail_url(public_id)
        else:
            url = storage.optimized_image_url(public_id, width, height, crop, quality)
    except StorageError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return {"url": url}
