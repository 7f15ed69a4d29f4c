"""
Send-mail handler.

POST /api/sendEmail sends a caller-composed email on behalf of `from`.
Sending is the requested action, so a Graph failure is returned to the
caller as an error response.
"""

import logging

from fastapi import APIRouter, Depends

from app.auth import verify_function_key
from app.config import get_settings
from app.models.email import EmailMessage, Recipient, SendEmailRequest, SendEmailResponse
from app.responses import ErrorResponse, error_response, success_response, utc_timestamp
from app.services.graph_client import graph_session
from app.services.notifier import sanitize_html, send_email

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_MESSAGES = {
    403: "Insufficient permissions to send email.",
    404: "Sender email address not found.",
}


@router.post(
    "/sendEmail",
    response_model=SendEmailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing/invalid fields or more than 50 recipients"},
        401: {"model": ErrorResponse, "description": "Bad function key or Graph authentication failed"},
        403: {"model": ErrorResponse, "description": "App lacks Mail.Send"},
        404: {"model": ErrorResponse, "description": "Sender mailbox not found"},
        429: {"model": ErrorResponse, "description": "Graph throttled the request"},
    },
    dependencies=[Depends(verify_function_key)],
)
async def send_email_handler(body: SendEmailRequest):
    """Send an email to up to 50 recipients via Microsoft Graph."""
    settings = get_settings()
    recipient_count = len(body.recipients)

    logger.info(f"Email send request: {recipient_count} recipient(s)")
    logger.info(f"From: {body.sender} ({body.from_name or settings.default_sender_name})")
    logger.info(f"Subject: {body.subject}")

    message = EmailMessage(
        subject=body.subject,
        body=sanitize_html(body.body),
        is_html=body.is_html,
        sender=body.sender,
        sender_name=body.from_name or settings.default_sender_name,
        recipients=[Recipient(address=address) for address in body.recipients],
    )

    try:
        async with graph_session(settings) as graph:
            await send_email(graph, message, save_to_sent_items=True)
    except Exception as e:
        logger.error(f"Error sending email: {e}")
        return error_response(e, "Failed to send email", _ERROR_MESSAGES)

    logger.info(f"Email sent successfully to {recipient_count} recipient(s)")
    return success_response(
        SendEmailResponse(
            message=f"Email sent to {recipient_count} recipient(s)",
            recipientCount=recipient_count,
            timestamp=utc_timestamp(),
        )
    )
