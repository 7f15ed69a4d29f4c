"""
Runtime configuration.

Secrets and deployment-specific identifiers are read from the environment
(optionally via a .env file) so the same code can be pointed at a different
tenant, group, or SharePoint list without a code change.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"


@dataclass(frozen=True)
class Settings:
    # Client-credential secrets for the Graph API
    tenant_id: Optional[str]
    client_id: Optional[str]
    client_secret: Optional[str]

    # Shared key callers must present (Azure Functions authLevel=function)
    function_key: Optional[str]

    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    license_group_id: str = "1263971a-19e5-42d1-a25e-36d71ec76014"
    sharepoint_site_url: str = "https://egginthenest.sharepoint.com/sites/INTRANET"
    sharepoint_list_id: str = "ebfc366f-f3ca-4230-8f81-25d4e23d5f0b"
    service_account_email: str = "noreply@egg-events.com"
    helpdesk_email: str = "helpdesk_eu@egg-events.com"
    talent_team_email: str = "OnBoard-Talent@egg-events.com"
    onboarding_list_email: str = "dl_freelanceonboarding@egg-events.com"
    supplier_portal_url: str = (
        "https://egginthenest.sharepoint.com/sites/SupplierPortal/SitePages/MyProfile.aspx"
    )
    invite_redirect_url: str = "https://portal.azure.com"
    default_sender_name: str = "EGG Events"
    max_recipients: int = 50

    @property
    def has_graph_credentials(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)


def get_settings() -> Settings:
    """
    Build Settings from the current environment.

    Called per request rather than cached at import time so that tests (and
    slot swaps) can change the environment without reloading modules.
    """
    defaults = Settings(tenant_id=None, client_id=None, client_secret=None, function_key=None)

    return Settings(
        tenant_id=os.getenv("AZURE_TENANT_ID") or None,
        client_id=os.getenv("AZURE_CLIENT_ID") or None,
        client_secret=os.getenv("AZURE_CLIENT_SECRET") or None,
        function_key=os.getenv("FUNCTION_KEY") or None,
        graph_base_url=os.getenv("GRAPH_BASE_URL", defaults.graph_base_url).rstrip("/"),
        license_group_id=os.getenv("LICENSE_GROUP_ID", defaults.license_group_id),
        sharepoint_site_url=os.getenv("SHAREPOINT_SITE_URL", defaults.sharepoint_site_url),
        sharepoint_list_id=os.getenv("SHAREPOINT_LIST_ID", defaults.sharepoint_list_id),
        service_account_email=os.getenv("SERVICE_ACCOUNT_EMAIL", defaults.service_account_email),
        helpdesk_email=os.getenv("HELPDESK_EMAIL", defaults.helpdesk_email),
        talent_team_email=os.getenv("TALENT_TEAM_EMAIL", defaults.talent_team_email),
        onboarding_list_email=os.getenv("ONBOARDING_LIST_EMAIL", defaults.onboarding_list_email),
        supplier_portal_url=os.getenv("SUPPLIER_PORTAL_URL", defaults.supplier_portal_url),
        invite_redirect_url=os.getenv("INVITE_REDIRECT_URL", defaults.invite_redirect_url),
        default_sender_name=os.getenv("DEFAULT_SENDER_NAME", defaults.default_sender_name),
        max_recipients=_positive_int("MAX_RECIPIENTS", defaults.max_recipients),
    )


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(f"Ignoring {name}={raw!r}: expected a positive integer, using {default}")
        return default
    return value
