"""
Password reset handler.

POST /api/resetFreelancerPassword sets a new temporary password on an
existing freelancer account (forced change at next sign-in) and emails it to
the freelancer's personal address.

The email is a side effect of the committed password change: a send failure
is logged and the new password is still returned to the caller.
"""

import logging

from fastapi import APIRouter, Depends

from app.auth import verify_function_key
from app.config import get_settings
from app.errors import GraphNotFoundError, UserNotFound
from app.models.directory import UserRecord
from app.models.email import EmailMessage, Recipient
from app.models.password_reset import ResetPasswordRequest, ResetPasswordResponse
from app.responses import ErrorResponse, error_response, success_response, utc_timestamp
from app.services.email_templates import password_reset_email
from app.services.graph_client import graph_session
from app.services.notifier import notify
from app.services.passwords import generate_secure_password

logger = logging.getLogger(__name__)

router = APIRouter()

_USER_SELECT = "id,userPrincipalName,displayName,givenName,surname"

_ERROR_MESSAGES = {
    403: "Insufficient permissions to reset passwords.",
    404: "User not found. Please verify the user exists in Entra ID.",
}


@router.post(
    "/resetFreelancerPassword",
    response_model=ResetPasswordResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing identifier or required fields"},
        401: {"model": ErrorResponse, "description": "Bad function key or Graph authentication failed"},
        403: {"model": ErrorResponse, "description": "App lacks User-PasswordProfile.ReadWrite.All"},
        404: {"model": ErrorResponse, "description": "User not found"},
        429: {"model": ErrorResponse, "description": "Graph throttled the request"},
    },
    dependencies=[Depends(verify_function_key)],
)
async def reset_freelancer_password(body: ResetPasswordRequest):
    """Reset a freelancer's password and email the new temporary one."""
    settings = get_settings()
    identifier = body.identifier

    logger.info(f"Resetting password for: {body.full_name}")
    logger.info(f"Identifier: {identifier}")

    try:
        async with graph_session(settings) as graph:
            try:
                user = UserRecord.model_validate(
                    await graph.get_user(identifier, select=_USER_SELECT)
                )
            except GraphNotFoundError:
                logger.warning(f"No user found with identifier: {identifier}")
                return error_response(
                    UserNotFound(f"No user found with identifier: {identifier}"),
                    "User not found",
                    {404: "User not found"},
                )
            logger.info(f"Found user: {user.principal_name} (ID: {user.id})")

            new_password = generate_secure_password()
            await graph.update_password(user.id, new_password, force_change=True)
            logger.info("Password updated successfully")

            subject, html = password_reset_email(
                first_name=body.first_name,
                upn=user.principal_name or identifier,
                password=new_password,
                portal_url=settings.supplier_portal_url,
                helpdesk_email=settings.helpdesk_email,
            )
            sent = await notify(
                graph,
                EmailMessage(
                    subject=subject,
                    body=html,
                    is_html=True,
                    sender=settings.service_account_email,
                    recipients=[Recipient(address=body.personal_email, name=body.full_name)],
                ),
                save_to_sent_items=False,
            )
            if sent:
                logger.info("Password reset email sent")
            else:
                logger.warning(f"Password for {user.principal_name} was reset but the email was not sent")
    except Exception as e:
        logger.error(f"Error resetting password: {e}")
        return error_response(
            e,
            "An unexpected error occurred while resetting the password.",
            _ERROR_MESSAGES,
        )

    return success_response(
        ResetPasswordResponse(
            newPassword=new_password,
            userPrincipalName=user.principal_name,
            timestamp=utc_timestamp(),
        )
    )
