"""
Client-credential (app-only) token acquisition for the Graph API.

A new MSAL application is built for every invocation, so no token is reused
across requests. MSAL is synchronous; callers on the event loop should go
through acquire_graph_token, which runs the exchange in the threadpool.
"""

import logging

import msal
from fastapi.concurrency import run_in_threadpool

from app.config import GRAPH_SCOPE, Settings
from app.errors import AuthConfigError

logger = logging.getLogger(__name__)

AUTHORITY_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}"


def get_access_token(settings: Settings) -> str:
    """
    Exchange the configured tenant/client/secret for a bearer token.

    Raises:
        AuthConfigError: if any secret is missing or Entra ID refuses the
            request (the MSAL result carries no access_token).
    """
    if not settings.has_graph_credentials:
        missing = [
            name
            for name, value in (
                ("AZURE_TENANT_ID", settings.tenant_id),
                ("AZURE_CLIENT_ID", settings.client_id),
                ("AZURE_CLIENT_SECRET", settings.client_secret),
            )
            if not value
        ]
        logger.error(f"Graph credentials not configured: missing {', '.join(missing)}")
        raise AuthConfigError(f"Missing Graph credentials: {', '.join(missing)}")

    app = msal.ConfidentialClientApplication(
        client_id=settings.client_id,
        client_credential=settings.client_secret,
        authority=AUTHORITY_TEMPLATE.format(tenant_id=settings.tenant_id),
    )
    result = app.acquire_token_for_client(scopes=[GRAPH_SCOPE])

    if not result or "access_token" not in result:
        description = (result or {}).get("error_description") or (result or {}).get("error")
        logger.error(f"Failed to acquire Graph token: {description}")
        raise AuthConfigError(f"Failed to acquire Graph token: {description}")

    return result["access_token"]


async def acquire_graph_token(settings: Settings) -> str:
    return await run_in_threadpool(get_access_token, settings)
