"""
User resolution against Entra ID.

Given whatever identity hints a caller has, find the directory user they
refer to, inviting a guest when nobody matches.

Strategies, tried in order (first match wins):

  1. Point lookup by object ID             O(1), most reliable
  2. Point lookup by userPrincipalName     O(1)
  3. Filtered search on mail or UPN       costly, takes the first hit
  4. Guest invitation (fallback_create)    provisions a new guest account

A failed point lookup never fails the resolution; it just moves on to the
next strategy. Duplicate hits from the search are not reconciled.
"""

import logging
from typing import Awaitable, Callable, Optional

from app.errors import GraphAPIError, GraphNotFoundError, UserNotFound
from app.models.directory import IdentityHints, UserRecord
from app.services.graph_client import GraphClient

logger = logging.getLogger(__name__)

DEFAULT_INVITE_REDIRECT_URL = "https://portal.azure.com"
DEFAULT_INVITE_MESSAGE = (
    "You have been invited to access EGG Events resources. "
    "Please accept this invitation to activate your account."
)

Strategy = Callable[[], Awaitable[Optional[UserRecord]]]


async def _lookup(graph: GraphClient, key: str, label: str) -> Optional[UserRecord]:
    logger.info(f"Looking up user by {label}: {key}")
    try:
        user = await graph.get_user(key)
    except GraphNotFoundError:
        logger.info(f"User not found by {label}, will try other methods")
        return None
    except GraphAPIError as e:
        logger.warning(f"Lookup by {label} failed ({e.status_code}): {e.message}; will try other methods")
        return None
    record = UserRecord.model_validate(user)
    logger.info(f"Found user by {label}: {record.principal_name}")
    return record


async def _search_by_email(graph: GraphClient, email: str) -> Optional[UserRecord]:
    logger.info(f"Searching for user by email: {email}")
    users = await graph.find_users_by_email(email)
    if not users:
        return None
    record = UserRecord.model_validate(users[0])
    logger.info(f"Found existing user: {record.principal_name}")
    return record


async def _invite(
    graph: GraphClient,
    email: str,
    display_name: str,
    redirect_url: str,
    message_body: str,
) -> UserRecord:
    logger.info(f"Creating new guest user with email: {email}")
    invitation = await graph.invite_guest(
        email=email,
        display_name=display_name,
        redirect_url=redirect_url,
        message_body=message_body,
    )
    record = UserRecord(
        id=invitation["invitedUser"]["id"],
        principal_name=invitation.get("invitedUserEmailAddress") or email,
        display_name=display_name,
        contact_email=email,
    )
    logger.info(f"Guest user created: {record.id}")
    return record


async def resolve_user(
    graph: GraphClient,
    hints: IdentityHints,
    first_name: str = "",
    last_name: str = "",
    fallback_create: bool = False,
    invite_redirect_url: str = DEFAULT_INVITE_REDIRECT_URL,
    invite_message: str = DEFAULT_INVITE_MESSAGE,
) -> UserRecord:
    """
    Resolve identity hints to a UserRecord.

    Args:
        graph: Open Graph client for this invocation.
        hints: Object ID, UPN and/or contact email.
        first_name, last_name: Used for the guest display name.
        fallback_create: Invite a guest when no existing user matches.

    Raises:
        UserNotFound: nothing matched and fallback_create is False (or there
            is no email to invite).
        GraphAPIError: the search or invitation call itself failed.
    """
    if hints.is_empty():
        raise UserNotFound("No identity hint provided")

    strategies: list[Strategy] = []
    if hints.object_id:
        strategies.append(lambda: _lookup(graph, hints.object_id, "Entra Object ID"))
    if hints.principal_name:
        strategies.append(lambda: _lookup(graph, hints.principal_name, "Entra UPN"))
    if hints.email:
        strategies.append(lambda: _search_by_email(graph, hints.email))

    for strategy in strategies:
        record = await strategy()
        if record is not None:
            return record

    if fallback_create and hints.email:
        display_name = f"{first_name} {last_name}".strip() or hints.email
        return await _invite(graph, hints.email, display_name, invite_redirect_url, invite_message)

    identifier = hints.object_id or hints.principal_name or hints.email
    raise UserNotFound(f"No user found with identifier: {identifier}")
