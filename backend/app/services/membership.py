"""
Idempotent group membership changes.

Both operations mutate directly and interpret the error instead of
pre-checking membership: "already a member" on add and "not a member" on
remove are the desired end state and are reported as ALREADY_IN_STATE.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.errors import GraphAPIError, GraphNotFoundError
from app.services.graph_client import GraphClient

logger = logging.getLogger(__name__)

# Graph answers a duplicate add with 400 Request_BadRequest and
# "One or more added object references already exist ..."
_ALREADY_MEMBER_MARKERS = ("already exist", "already a member")


class MutationOutcome(str, Enum):
    APPLIED = "applied"
    ALREADY_IN_STATE = "already_in_state"
    FAILED = "failed"


@dataclass
class MutationResult:
    outcome: MutationOutcome
    error: Optional[GraphAPIError] = None

    @property
    def ok(self) -> bool:
        return self.outcome is not MutationOutcome.FAILED

    def raise_for_failure(self) -> None:
        if self.error is not None and not self.ok:
            raise self.error


def _is_already_member(error: GraphAPIError) -> bool:
    if error.status_code not in (400, 409):
        return False
    message = (error.message or "").lower()
    return any(marker in message for marker in _ALREADY_MEMBER_MARKERS)


async def add_member(graph: GraphClient, group_id: str, user_id: str) -> MutationResult:
    """Add user_id to group_id; an existing membership counts as success."""
    logger.info(f"Adding user {user_id} to group {group_id}")
    try:
        await graph.add_group_member(group_id, user_id)
    except GraphAPIError as e:
        if _is_already_member(e):
            logger.info("User is already a member of the group")
            return MutationResult(MutationOutcome.ALREADY_IN_STATE)
        logger.error(f"Error adding user to group: {e.message}")
        return MutationResult(MutationOutcome.FAILED, error=e)

    logger.info("User added to group")
    return MutationResult(MutationOutcome.APPLIED)


async def remove_member(graph: GraphClient, group_id: str, user_id: str) -> MutationResult:
    """Remove user_id from group_id; a missing membership counts as success."""
    logger.info(f"Removing user {user_id} from group {group_id}")
    try:
        await graph.remove_group_member(group_id, user_id)
    except GraphNotFoundError:
        logger.info("User was not a member of the group")
        return MutationResult(MutationOutcome.ALREADY_IN_STATE)
    except GraphAPIError as e:
        logger.error(f"Error removing user from group: {e.message}")
        return MutationResult(MutationOutcome.FAILED, error=e)

    logger.info("User removed from group")
    return MutationResult(MutationOutcome.APPLIED)


async def ensure_member(graph: GraphClient, group_id: str, user_id: str) -> MutationOutcome:
    result = await add_member(graph, group_id, user_id)
    result.raise_for_failure()
    return result.outcome


async def ensure_not_member(graph: GraphClient, group_id: str, user_id: str) -> MutationOutcome:
    result = await remove_member(graph, group_id, user_id)
    result.raise_for_failure()
    return result.outcome
