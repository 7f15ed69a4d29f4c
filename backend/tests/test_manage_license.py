"""
POST /api/manageLicense endpoint tests.

Covers the resolution chain as seen from the handler, idempotent group
membership, and the error mapping.
"""

import os
import pytest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

# Ensure env vars are set before importing anything that triggers app imports
FUNCTION_KEY = os.environ.setdefault("FUNCTION_KEY", "test-function-key")

from fastapi.testclient import TestClient

from app.config import get_settings
from app.errors import GraphAPIError, GraphNotFoundError, GraphPermissionError, GraphRateLimitError
from app.services.graph_client import GraphClient

HEADERS = {"x-functions-key": FUNCTION_KEY}

ALREADY_EXISTS = GraphAPIError(
    "One or more added object references already exist for the following modified properties: 'members'.",
    status_code=400,
)


def _session_for(graph):
    @asynccontextmanager
    async def _session(settings):
        yield graph
    return _session


def _make_payload(**overrides) -> dict:
    payload = {
        "userEmail": "a@b.com",
        "firstName": "A",
        "lastName": "B",
        "isActive": True,
    }
    payload.update(overrides)
    return payload


def _make_graph_user(user_id: str = "user-123", upn: str = "a.b.talent@egg-events.com") -> dict:
    return {"id": user_id, "userPrincipalName": upn, "mail": "a@b.com", "displayName": "A B"}


@pytest.fixture()
def client():
    from app.main import app
    return TestClient(app)


@pytest.fixture()
def graph():
    return AsyncMock(spec=GraphClient)


class TestGrantLicense:

    def test_new_partner_is_invited_then_added(self, client, graph):
        graph.find_users_by_email.return_value = []
        graph.invite_guest.return_value = {
            "invitedUserEmailAddress": "a@b.com",
            "invitedUser": {"id": "guest-1"},
        }

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post("/api/manageLicense", json=_make_payload(), headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["action"] == "added"
        assert data["message"] == "User added to Office 365 E1 group"
        assert data["userId"] == "guest-1"
        assert data["userPrincipalName"] == "a@b.com"

        graph.invite_guest.assert_awaited_once()
        assert graph.invite_guest.await_args.kwargs["redirect_url"] == "https://portal.azure.com"
        graph.add_group_member.assert_awaited_once_with(get_settings().license_group_id, "guest-1")
        graph.remove_group_member.assert_not_awaited()

    def test_existing_member_is_still_success(self, client, graph):
        graph.get_user.return_value = _make_graph_user()
        graph.add_group_member.side_effect = ALREADY_EXISTS

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json=_make_payload(entraObjectId="user-123"),
                headers=HEADERS,
            )

        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "added"
        assert data["userPrincipalName"] == "a.b.talent@egg-events.com"
        graph.find_users_by_email.assert_not_awaited()
        graph.invite_guest.assert_not_awaited()

    def test_upn_lookup_when_no_object_id(self, client, graph):
        graph.get_user.return_value = _make_graph_user()

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json=_make_payload(entraUPN="a.b.talent@egg-events.com"),
                headers=HEADERS,
            )

        assert response.status_code == 200
        graph.get_user.assert_awaited_once_with("a.b.talent@egg-events.com")


class TestRevokeLicense:

    def test_removes_member(self, client, graph):
        graph.get_user.return_value = _make_graph_user()

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json=_make_payload(entraObjectId="user-123", isActive=False),
                headers=HEADERS,
            )

        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "removed"
        assert data["message"] == "User removed from Office 365 E1 group"
        graph.remove_group_member.assert_awaited_once_with(get_settings().license_group_id, "user-123")
        graph.add_group_member.assert_not_awaited()

    def test_removing_non_member_is_success(self, client, graph):
        graph.get_user.return_value = _make_graph_user()
        graph.remove_group_member.side_effect = GraphNotFoundError("Resource does not exist")

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json=_make_payload(entraObjectId="user-123", isActive=False),
                headers=HEADERS,
            )

        assert response.status_code == 200
        assert response.json()["action"] == "removed"


class TestManageLicenseValidation:

    def test_missing_fields(self, client, graph):
        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json={"userEmail": "a@b.com"},
                headers=HEADERS,
            )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: firstName, lastName, isActive"
        graph.get_user.assert_not_awaited()
        graph.find_users_by_email.assert_not_awaited()

    def test_missing_body(self, client):
        response = client.post("/api/manageLicense", headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["error"] == "Request body is required"


class TestManageLicenseErrors:

    @pytest.mark.parametrize(
        "error, status, message",
        [
            (GraphPermissionError("Insufficient privileges"), 403, "Insufficient permissions to manage licenses."),
            (GraphRateLimitError("Too many requests"), 429, "Rate limit exceeded. Please try again later."),
            (GraphAPIError("Invalid object identifier", status_code=400), 500, "Failed to manage license"),
        ],
    )
    def test_membership_failures_map_to_status(self, client, graph, error, status, message):
        graph.get_user.return_value = _make_graph_user()
        graph.add_group_member.side_effect = error

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json=_make_payload(entraObjectId="user-123"),
                headers=HEADERS,
            )

        assert response.status_code == status
        data = response.json()
        assert data["success"] is False
        assert data["error"] == message

    def test_missing_group_returns_404(self, client, graph):
        graph.get_user.return_value = _make_graph_user()
        graph.add_group_member.side_effect = GraphNotFoundError("Resource 'group' does not exist")

        with patch("app.routers.licenses.graph_session", _session_for(graph)):
            response = client.post(
                "/api/manageLicense",
                json=_make_payload(entraObjectId="user-123"),
                headers=HEADERS,
            )

        assert response.status_code == 404
        assert response.json()["error"] == "User or group not found."
