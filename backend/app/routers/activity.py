"""
Activity-check webhook.

POST /api/handleActivityResponse receives the Yes/No answer from the
actionable activity-check email (forwarded by a Logic App).

  yes → stamp the supplier list item as Active, thank the supplier
  no  → remove the E1 license, mark the list item as declined, tell the
        requesting manager (when known)

Any remote failure is reported as 500 with the Graph message in `details`.
Emails here are side effects of a change that has already been applied, so
send failures are logged and never change the response.
"""

import logging

from fastapi import APIRouter, Depends

from app.auth import verify_function_key
from app.config import get_settings
from app.models.activity import (
    ActivityAction,
    ActivityAnswer,
    ActivityResponseRequest,
    ActivityResponseResult,
)
from app.models.directory import ExternalRecord
from app.models.email import EmailMessage, Importance, Recipient
from app.responses import ErrorResponse, error_response, success_response, utc_timestamp
from app.services.email_templates import activity_confirmed_email, license_removed_email
from app.services.graph_client import graph_session
from app.services.membership import ensure_not_member
from app.services.notifier import notify
from app.services.sharepoint import activity_fields, patch_record

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/handleActivityResponse",
    response_model=ActivityResponseResult,
    responses={
        400: {"model": ErrorResponse, "description": "Missing fields or response not 'yes'/'no'"},
        401: {"model": ErrorResponse, "description": "Bad function key"},
        500: {"model": ErrorResponse, "description": "Token acquisition or a Graph call failed"},
    },
    dependencies=[Depends(verify_function_key)],
)
async def handle_activity_response(body: ActivityResponseRequest):
    """Apply a supplier's Yes/No answer to the activity check."""
    settings = get_settings()
    timestamp = utc_timestamp()

    logger.info(f"Processing {body.response.value.upper()} response for: {body.display_name}")
    logger.info(f"Email: {body.supplier_email}")
    logger.info(f"Entra Object ID: {body.entra_object_id}")
    logger.info(f"SharePoint Item ID: {body.sharepoint_item_id}")

    try:
        async with graph_session(settings) as graph:
            site_id = await graph.get_site_id(settings.sharepoint_site_url)
            record = ExternalRecord(
                site_id=site_id,
                list_id=settings.sharepoint_list_id,
                item_id=body.sharepoint_item_id,
                fields=activity_fields(body.response, timestamp),
            )

            if body.response is ActivityAnswer.YES:
                logger.info("User confirmed activity - updating SharePoint")
                await patch_record(graph, record)

                subject, html = activity_confirmed_email(
                    body.first_name or "", settings.talent_team_email
                )
                await notify(
                    graph,
                    EmailMessage(
                        subject=subject,
                        body=html,
                        sender=settings.service_account_email,
                        recipients=[Recipient(address=body.supplier_email)],
                    ),
                )
                result = ActivityResponseResult(
                    action=ActivityAction.ACTIVITY_CONFIRMED,
                    message="Activity confirmed and SharePoint updated",
                    timestamp=timestamp,
                )
            else:
                logger.info("User declined - removing E1 license")
                await ensure_not_member(graph, settings.license_group_id, body.entra_object_id)
                await patch_record(graph, record)

                message = "License removed"
                if body.requested_by_email:
                    subject, html = license_removed_email(
                        body.display_name, body.supplier_email, settings.helpdesk_email
                    )
                    await notify(
                        graph,
                        EmailMessage(
                            subject=subject,
                            body=html,
                            sender=settings.service_account_email,
                            recipients=[Recipient(address=body.requested_by_email)],
                            cc=[Recipient(address=settings.talent_team_email)],
                            bcc=[Recipient(address=settings.onboarding_list_email)],
                            importance=Importance.HIGH,
                        ),
                    )
                    message = "License removed and manager notified"
                result = ActivityResponseResult(
                    action=ActivityAction.LICENSE_REMOVED,
                    message=message,
                    timestamp=timestamp,
                )
    except Exception as e:
        logger.error(f"Error processing activity response: {e}")
        return error_response(e, "Failed to process activity response", status_code=500)

    logger.info(f"Activity response processed: {result.action.value}")
    return success_response(result)
