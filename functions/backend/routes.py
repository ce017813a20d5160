"""
HTTP routes served to the web client in place of its server routes.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from firebase_admin import exceptions as firebase_exceptions
from google.genai import errors as genai_errors

from backend.cache import TranslationCache
from backend.config import Settings, get_settings
from backend.db import DbClient
from backend.dependencies import (
    get_db_client,
    get_identity_provider,
    get_mailer,
    get_payment_gateway,
    get_push_sender,
    get_translation_cache,
)
from backend.identity import IdentityProvider, UnknownAccountError
from backend.mailer import Mailer, MailerError, send_password_reset_email, send_verification_email
from backend.payments import PaymentGateway, PaymentGatewayError
from backend.push import PushSender, StaleTokenError
from backend.schemas import (
    CreateOrderResponse,
    DetectLanguageRequest,
    DetectLanguageResponse,
    FetchPaymentRequest,
    FetchPaymentResponse,
    GeneratePasswordResetLinkRequest,
    GenerateVerificationLinkRequest,
    SendEmailResponse,
    SendNotificationRequest,
    SendPasswordResetRequest,
    SendVerificationEmailRequest,
    TranslateRequest,
    TranslateResponse,
    VerifyUpiRequest,
)
from marketplace.notifications import build_push_message
from models.gemini import GeminiInvalidResponseException
from shared.json_utils import convert_keys
from translation import translation

logger = logging.getLogger(__name__)

router = APIRouter()

_TRANSLATION_ERRORS = (GeminiInvalidResponseException, genai_errors.APIError)


def _to_camel_dict(obj) -> dict:
    return convert_keys(asdict(obj), "snake_to_camel")


@router.post("/create-order", response_model=CreateOrderResponse)
def create_order(gateway: PaymentGateway = Depends(get_payment_gateway)):
    """Creates the ₹1 order the client pays to prove ownership of a UPI ID."""
    try:
        order = gateway.create_order()
    except PaymentGatewayError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return _to_camel_dict(order)


@router.post("/fetch-payment", response_model=FetchPaymentResponse)
def fetch_payment(
    payload: FetchPaymentRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    if not payload.payment_id:
        raise HTTPException(status_code=400, detail="Payment ID required")
    try:
        payment = gateway.fetch_payment(payload.payment_id)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return _to_camel_dict(payment)


@router.post("/verify-upi")
def verify_upi(
    payload: VerifyUpiRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Validates a VPA with the gateway. A VPA the gateway rejects is still a
    200 response with `success: false`.
    """
    if not payload.vpa:
        return JSONResponse(
            status_code=400, content={"success": False, "error": "VPA is required"}
        )
    try:
        result = gateway.validate_vpa(payload.vpa.strip())
    except PaymentGatewayError as e:
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    if not result.success:
        return {"success": False, "error": result.error or "VPA could not be verified"}
    return {"success": True, "customerName": result.customer_name, "vpa": result.vpa}


@router.post("/generate-verification-link")
def generate_verification_link(
    payload: GenerateVerificationLinkRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    settings: Settings = Depends(get_settings),
):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")
    try:
        link = identity.generate_email_verification_link(
            payload.email, f"{settings.public_app_url}/signup"
        )
    except UnknownAccountError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except firebase_exceptions.FirebaseError as e:
        logger.exception("Failed to generate verification link")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to generate verification link") from e

    logger.info("Generated verification link for %s", payload.email)
    return {
        "success": True,
        "verificationLink": link,
        "email": payload.email,
        "userName": payload.user_name,
    }


@router.post("/generate-password-reset-link")
def generate_password_reset_link(
    payload: GeneratePasswordResetLinkRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    settings: Settings = Depends(get_settings),
):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")
    try:
        link = identity.generate_password_reset_link(
            payload.email, f"{settings.public_app_url}/signin"
        )
    except UnknownAccountError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except firebase_exceptions.FirebaseError as e:
        logger.exception("Failed to generate password reset link")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to generate password reset link") from e

    logger.info("Generated password reset link for %s", payload.email)
    return {"success": True, "resetLink": link, "email": payload.email}


@router.post("/send-verification-email", response_model=SendEmailResponse)
def send_verification(
    payload: SendVerificationEmailRequest,
    mailer: Mailer = Depends(get_mailer),
):
    if not payload.email or not payload.verification_link:
        raise HTTPException(
            status_code=400, detail="Email and verification link are required"
        )
    try:
        message_id = send_verification_email(
            mailer, payload.email, payload.verification_link, payload.user_name
        )
    except MailerError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"success": True, "messageId": message_id}


@router.post("/send-password-reset", response_model=SendEmailResponse)
def send_password_reset(
    payload: SendPasswordResetRequest,
    mailer: Mailer = Depends(get_mailer),
):
    if not payload.email or not payload.reset_link:
        raise HTTPException(status_code=400, detail="Email and reset link are required")
    try:
        message_id = send_password_reset_email(
            mailer, payload.email, payload.reset_link, payload.user_name
        )
    except MailerError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"success": True, "messageId": message_id}


@router.post("/send-notification")
def send_notification(
    payload: SendNotificationRequest,
    db: DbClient = Depends(get_db_client),
    sender: PushSender = Depends(get_push_sender),
):
    """Sends a push notification to a user's registered device."""
    if not payload.user_id or not payload.title or not payload.body:
        raise HTTPException(
            status_code=400, detail="Missing required fields: userId, title, body"
        )

    user = db.get_user(payload.user_id)
    if user is None:
        logger.warning("User %s not found", payload.user_id)
        raise HTTPException(status_code=404, detail="User not found")

    token = user.get("fcmToken")
    if not token:
        # Not an error: the user has not granted notification permission.
        logger.info("No FCM token for user %s", payload.user_id)
        return {"success": False, "error": "No FCM token for this user"}

    message = build_push_message(token, payload.title, payload.body, payload.data)
    try:
        message_id = sender.send(message)
    except StaleTokenError as e:
        logger.warning("Clearing stale FCM token for user %s", payload.user_id)
        db.delete_user_field(payload.user_id, "fcmToken")
        raise HTTPException(status_code=410, detail="FCM token is no longer valid") from e
    except firebase_exceptions.FirebaseError as e:
        logger.exception("FCM send failed for user %s", payload.user_id)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to send notification") from e

    logger.info("Push sent to user %s: %s", payload.user_id, message_id)
    return {"success": True, "messageId": message_id}


def _require_translation_key(settings: Settings) -> str:
    if not settings.gemini_api_key:
        logger.error("Translation API key is not configured")
        raise HTTPException(status_code=500, detail="Translation service is not configured")
    return settings.gemini_api_key


@router.post("/translate", response_model=TranslateResponse)
def translate(
    payload: TranslateRequest,
    cache: TranslationCache = Depends(get_translation_cache),
    settings: Settings = Depends(get_settings),
):
    api_key = _require_translation_key(settings)
    if not payload.text or not payload.target_language:
        raise HTTPException(
            status_code=400, detail="Text and target language are required"
        )
    try:
        result = translation.translate_text(
            payload.text,
            payload.target_language,
            cache,
            api_key=api_key,
            model=settings.translation_model,
        )
    except _TRANSLATION_ERRORS as e:
        logger.exception("Translation failed")
        raise HTTPException(status_code=500, detail="Translation failed") from e
    return _to_camel_dict(result)


@router.post("/translate/detect", response_model=DetectLanguageResponse)
def detect_language(
    payload: DetectLanguageRequest,
    settings: Settings = Depends(get_settings),
):
    api_key = _require_translation_key(settings)
    if not payload.text:
        raise HTTPException(status_code=400, detail="Text is required")
    try:
        detected = translation.detect_language(
            payload.text, api_key=api_key, model=settings.translation_model
        )
    except _TRANSLATION_ERRORS as e:
        logger.exception("Language detection failed")
        raise HTTPException(status_code=500, detail="Language detection failed") from e
    return {"detectedLanguage": detected}
