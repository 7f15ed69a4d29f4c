"""
License management handler.

POST /api/manageLicense grants or revokes the Office 365 E1 license by
adding the partner to (or removing them from) the license group.

Flow:
  1. Resolve the partner: object ID → UPN → email search → guest invitation
  2. isActive=true  → add to the license group (already a member is fine)
     isActive=false → remove from the license group (not a member is fine)
"""

import logging

from fastapi import APIRouter, Depends

from app.auth import verify_function_key
from app.config import get_settings
from app.models.directory import IdentityHints
from app.models.license import LicenseAction, LicenseRequest, LicenseResponse
from app.responses import ErrorResponse, error_response, success_response, utc_timestamp
from app.services.graph_client import graph_session
from app.services.membership import ensure_member, ensure_not_member
from app.services.user_resolver import resolve_user

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_MESSAGES = {
    403: "Insufficient permissions to manage licenses.",
    404: "User or group not found.",
}


@router.post(
    "/manageLicense",
    response_model=LicenseResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing required fields"},
        401: {"model": ErrorResponse, "description": "Bad function key or Graph authentication failed"},
        403: {"model": ErrorResponse, "description": "App lacks GroupMember.ReadWrite.All / User.Invite.All"},
        404: {"model": ErrorResponse, "description": "User or group not found"},
        429: {"model": ErrorResponse, "description": "Graph throttled the request"},
    },
    dependencies=[Depends(verify_function_key)],
)
async def manage_license(body: LicenseRequest):
    """Add or remove a partner from the E1 license group."""
    settings = get_settings()

    logger.info(f"Processing license for: {body.user_email}")
    logger.info(f"Entra UPN: {body.entra_upn or 'Not provided'}")
    logger.info(f"Entra Object ID: {body.entra_object_id or 'Not provided'}")
    logger.info(f"Active status: {body.is_active}")

    hints = IdentityHints(
        object_id=body.entra_object_id,
        principal_name=body.entra_upn,
        email=body.user_email,
    )

    try:
        async with graph_session(settings) as graph:
            user = await resolve_user(
                graph,
                hints,
                first_name=body.first_name,
                last_name=body.last_name,
                fallback_create=True,
                invite_redirect_url=settings.invite_redirect_url,
            )
            logger.info(f"User identified: {user.principal_name} ({user.id})")

            if body.is_active:
                await ensure_member(graph, settings.license_group_id, user.id)
            else:
                await ensure_not_member(graph, settings.license_group_id, user.id)
    except Exception as e:
        logger.error(f"Error managing license: {e}")
        return error_response(e, "Failed to manage license", _ERROR_MESSAGES)

    action = LicenseAction.ADDED if body.is_active else LicenseAction.REMOVED
    return success_response(
        LicenseResponse(
            action=action,
            message=(
                "User added to Office 365 E1 group"
                if body.is_active
                else "User removed from Office 365 E1 group"
            ),
            userPrincipalName=user.principal_name,
            userId=user.id,
            timestamp=utc_timestamp(),
        )
    )
