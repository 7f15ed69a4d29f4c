"""
Thin async client for the Microsoft Graph REST API.

Every handler opens one session (fresh token, fresh client) per invocation:

    async with graph_session(settings) as graph:
        user = await graph.get_user(object_id)

Non-2xx responses are raised as GraphAPIError subclasses (see app.errors)
so callers never inspect httpx responses directly. There is no retry and no
timeout beyond the httpx default; a throttled call (429) surfaces
immediately as GraphRateLimitError.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional
from urllib.parse import quote, urlparse

import httpx

from app.config import Settings
from app.errors import GraphAPIError, graph_error_from_response
from app.services.credentials import acquire_graph_token

logger = logging.getLogger(__name__)


def odata_quote(value: str) -> str:
    """Escape a value for use inside a single-quoted OData string literal."""
    return value.replace("'", "''")


def _parse_error(response: httpx.Response) -> GraphAPIError:
    """Turn a failed Graph response into the matching GraphAPIError."""
    code: Optional[str] = None
    message = response.reason_phrase or f"HTTP {response.status_code}"
    try:
        body = response.json()
        error = (body.get("error") if isinstance(body, dict) else None) or {}
        code = error.get("code")
        message = error.get("message") or message
    except ValueError:
        if response.text:
            message = response.text
    return graph_error_from_response(response.status_code, code, message)


class GraphClient:
    def __init__(
        self,
        token: str,
        base_url: str = "https://graph.microsoft.com/v1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "GraphClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Transport ────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        response = await self._client.request(method, url, params=params, json=json)

        if response.is_error:
            error = _parse_error(response)
            logger.debug(f"Graph {method} {path} failed: {error!r}")
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ── Users ────────────────────────────────────────────────────────

    async def get_user(self, id_or_upn: str, select: Optional[str] = None) -> dict:
        """Point lookup by object ID or userPrincipalName."""
        params = {"$select": select} if select else None
        return await self._request("GET", f"/users/{quote(id_or_upn, safe='@')}", params=params)

    async def find_users_by_email(self, email: str) -> list[dict]:
        """Users whose mail or userPrincipalName equals `email`."""
        literal = odata_quote(email)
        params = {
            "$filter": f"mail eq '{literal}' or userPrincipalName eq '{literal}'",
            "$select": "id,userPrincipalName,mail,displayName",
        }
        result = await self._request("GET", "/users", params=params)
        return (result or {}).get("value", [])

    async def invite_guest(
        self,
        email: str,
        display_name: str,
        redirect_url: str,
        message_body: Optional[str] = None,
    ) -> dict:
        """Create a B2B guest invitation; Graph creates the guest user immediately."""
        payload: dict = {
            "invitedUserEmailAddress": email,
            "invitedUserDisplayName": display_name,
            "inviteRedirectUrl": redirect_url,
            "sendInvitationMessage": True,
        }
        if message_body:
            payload["invitedUserMessageInfo"] = {"customizedMessageBody": message_body}
        return await self._request("POST", "/invitations", json=payload)

    async def update_password(self, user_id: str, password: str, force_change: bool = True) -> None:
        await self._request(
            "PATCH",
            f"/users/{quote(user_id, safe='@')}",
            json={
                "passwordProfile": {
                    "forceChangePasswordNextSignIn": force_change,
                    "password": password,
                }
            },
        )

    # ── Groups ───────────────────────────────────────────────────────

    async def add_group_member(self, group_id: str, user_id: str) -> None:
        await self._request(
            "POST",
            f"/groups/{group_id}/members/$ref",
            json={"@odata.id": f"{self._base_url}/directoryObjects/{user_id}"},
        )

    async def remove_group_member(self, group_id: str, user_id: str) -> None:
        await self._request("DELETE", f"/groups/{group_id}/members/{user_id}/$ref")

    # ── SharePoint ───────────────────────────────────────────────────

    async def get_site_id(self, site_url: str) -> str:
        """Resolve a site URL like https://tenant.sharepoint.com/sites/X to its Graph site ID."""
        parsed = urlparse(site_url)
        site = await self._request("GET", f"/sites/{parsed.hostname}:{parsed.path}")
        return site["id"]

    async def update_list_item(
        self,
        site_id: str,
        list_id: str,
        item_id: str,
        fields: dict,
    ) -> None:
        """PATCH the given fields of a list item; unspecified fields are untouched."""
        await self._request(
            "PATCH",
            f"/sites/{site_id}/lists/{list_id}/items/{item_id}/fields",
            json=fields,
        )

    # ── Mail ─────────────────────────────────────────────────────────

    async def send_mail(self, sender: str, message: dict, save_to_sent_items: bool = False) -> None:
        await self._request(
            "POST",
            f"/users/{quote(sender, safe='@')}/sendMail",
            json={"message": message, "saveToSentItems": save_to_sent_items},
        )


@asynccontextmanager
async def graph_session(settings: Settings) -> AsyncIterator[GraphClient]:
    """Acquire a fresh token and yield a GraphClient that is closed on exit."""
    token = await acquire_graph_token(settings)
    async with GraphClient(token, settings.graph_base_url) as graph:
        yield graph
