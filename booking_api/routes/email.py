"""
Email Routes - Booking confirmation emails
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_mail_gateway
from ..email_service import MailGateway
from ..exceptions import BookingValidationError
from ..schemas import ErrorResponse, MailNotification, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mail", tags=["Email"])

MISSING_MAIL_FIELDS = "Missing required fields: to, eventName"
MULTILINE_HEADER_FIELDS = "Invalid fields: to and eventName must not contain line breaks"


@router.post(
    "/send-email",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send_confirmation_email(
    data: MailNotification,
    mail: MailGateway = Depends(get_mail_gateway),
):
    """Send the booking confirmation email. Called by the client after a successful booking."""
    if not (data.to or "").strip() or not (data.event_name or "").strip():
        raise BookingValidationError(MISSING_MAIL_FIELDS)
    # both end up in message headers
    if any(c in value for value in (data.to, data.event_name) for c in "\r\n"):
        raise BookingValidationError(
            MULTILINE_HEADER_FIELDS, BookingValidationError.INVALID_HEADER
        )

    await run_in_threadpool(mail.send_notification, data)
    logger.info(f'Confirmation for "{data.event_name}" sent to {data.to}')
    return {"message": "Email sent successfully"}
