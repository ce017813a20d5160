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
"""Budget renegotiation between a job poster and an applicant."""

import logging
import math
from typing import Optional

from marketplace.notifications import create_notification
from shared.json_utils import to_document
from shared.types import (
    NegotiationOffer,
    NegotiationStatus,
    Notification,
    NotificationType,
    OfferParty,
)
from shared.utils import format_amount, now_ms

logger = logging.getLogger(__name__)

INITIAL_COUNTER_OFFER_MESSAGE = "Initial counter-offer"


def _get_application(db, application_id: str) -> dict:
    application = db.get_application(application_id)
    if application is None:
        raise LookupError("Application not found")
    return application


def _check_offer(amount: Optional[float]) -> float:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise ValueError("Offer amount must be greater than zero.")
    return amount


def _offer_entry(amount: float, offered_by: OfferParty, message: Optional[str]) -> dict:
    offer = NegotiationOffer(
        amount=amount,
        offered_by=offered_by,
        offered_at=now_ms(),
        message=message or None,
    )
    return to_document(offer, drop_none=True)


def renegotiate_budget(
    db,
    application_id: str,
    job_id: str,
    job_title: str,
    new_offer: float,
    message: Optional[str] = None,
) -> None:
    """
    Records a counter-offer from the job poster and notifies the applicant.

    On the first round the applicant's original counter-offer is seeded into
    the history so the thread reads from the beginning.
    """
    new_offer = _check_offer(new_offer)
    application = _get_application(db, application_id)
    history = list(application.get("negotiationHistory") or [])

    if not history and application.get("counterOffer"):
        history.append(
            {
                "amount": application["counterOffer"],
                "offeredBy": OfferParty.APPLICANT,
                "offeredAt": application.get("appliedAt") or now_ms(),
                "message": INITIAL_COUNTER_OFFER_MESSAGE,
            }
        )
    history.append(_offer_entry(new_offer, OfferParty.POSTER, message))

    db.update_application(
        application_id,
        {
            "negotiationHistory": history,
            "currentOffer": new_offer,
            "offerBy": OfferParty.POSTER,
            "negotiationStatus": NegotiationStatus.ONGOING,
            "budgetSatisfied": False,
        },
    )
    create_notification(
        db,
        Notification(
            user_id=application["userId"],
            type=NotificationType.COUNTER_OFFER_RECEIVED,
            title="New Counter-Offer",
            message=f'Job poster offered ₹{format_amount(new_offer)} for "{job_title}"',
            job_id=job_id,
            job_title=job_title,
            application_id=application_id,
            amount=new_offer,
        ),
    )
    logger.info("Poster offered %s on application %s", new_offer, application_id)


def respond_to_renegotiation(
    db,
    application_id: str,
    job_id: str,
    job_title: str,
    job_poster_id: str,
    accept: bool,
    counter_offer: Optional[float] = None,
    message: Optional[str] = None,
) -> None:
    """Applicant accepts the poster's current offer or counters it."""
    application = _get_application(db, application_id)

    if accept:
        final_amount = application.get("currentOffer") or application.get("counterOffer")
        db.update_application(
            application_id,
            {
                "currentOffer": final_amount,
                "negotiationStatus": NegotiationStatus.ACCEPTED,
                "budgetSatisfied": True,
            },
        )
        create_notification(
            db,
            Notification(
                user_id=job_poster_id,
                type=NotificationType.BUDGET_ACCEPTED,
                title="Offer Accepted!",
                message=(
                    f"Applicant accepted your offer of ₹{format_amount(final_amount or 0)} "
                    f'for "{job_title}"'
                ),
                job_id=job_id,
                job_title=job_title,
                application_id=application_id,
                amount=final_amount,
            ),
        )
        logger.info("Applicant accepted offer on application %s", application_id)
        return

    counter_offer = _check_offer(counter_offer)
    history = list(application.get("negotiationHistory") or [])
    history.append(_offer_entry(counter_offer, OfferParty.APPLICANT, message))
    db.update_application(
        application_id,
        {
            "negotiationHistory": history,
            "currentOffer": counter_offer,
            "offerBy": OfferParty.APPLICANT,
            "negotiationStatus": NegotiationStatus.ONGOING,
            "counterOffer": counter_offer,
            "budgetSatisfied": False,
        },
    )
    create_notification(
        db,
        Notification(
            user_id=job_poster_id,
            type=NotificationType.APPLICANT_COUNTER_OFFER,
            title="New Counter-Offer",
            message=f'Applicant offered ₹{format_amount(counter_offer)} for "{job_title}"',
            job_id=job_id,
            job_title=job_title,
            application_id=application_id,
            amount=counter_offer,
        ),
    )
    logger.info("Applicant countered %s on application %s", counter_offer, application_id)


def accept_counter_offer(db, application_id: str, job_id: str, job_title: str) -> None:
    """Job poster accepts the applicant's latest counter-offer."""
    application = _get_application(db, application_id)
    amount = application.get("counterOffer")
    if not amount:
        raise ValueError("This application has no counter-offer to accept.")

    db.update_application(
        application_id,
        {
            "negotiationStatus": NegotiationStatus.ACCEPTED,
            "budgetSatisfied": True,
            "currentOffer": amount,
        },
    )
    create_notification(
        db,
        Notification(
            user_id=application["userId"],
            type=NotificationType.BUDGET_ACCEPTED,
            title="Offer Accepted!",
            message=f'Job poster accepted your offer of ₹{format_amount(amount)} for "{job_title}"',
            job_id=job_id,
            job_title=job_title,
            application_id=application_id,
            amount=amount,
        ),
    )
