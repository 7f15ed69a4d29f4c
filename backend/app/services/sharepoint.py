"""
SharePoint list updates for the supplier database.

Field names are the internal column names of the supplier list
(supplierdb_*). Updates are PATCHes: columns not named are left alone and
the result is not read back.
"""

import logging
from typing import Any, Dict

from app.models.activity import ActivityAnswer
from app.models.directory import ExternalRecord
from app.services.graph_client import GraphClient

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "Active"
DECLINED_STATUS = "License Removed - User Declined"


def activity_fields(answer: ActivityAnswer, timestamp: str) -> Dict[str, Any]:
    """Column updates for a supplier's answer to the activity check."""
    if answer is ActivityAnswer.YES:
        return {
            "supplierdb_LastActivityCheck": timestamp,
            "supplierdb_ActivityReminderCount": 0,
            "supplierdb_ActivityCheckStatus": ACTIVE_STATUS,
        }
    return {
        "supplierdb_SendToEntra": False,
        "supplierdb_ActivityCheckStatus": DECLINED_STATUS,
        "supplierdb_LicenseRemovedDate": timestamp,
    }


async def patch_record(graph: GraphClient, record: ExternalRecord) -> None:
    logger.info(f"Updating SharePoint item {record.item_id}")
    await graph.update_list_item(record.site_id, record.list_id, record.item_id, record.fields)
    logger.info("SharePoint item updated successfully")
