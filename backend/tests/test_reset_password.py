"""
POST /api/resetFreelancerPassword endpoint tests.
"""

import os
import pytest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

# Ensure env vars are set before importing anything that triggers app imports
FUNCTION_KEY = os.environ.setdefault("FUNCTION_KEY", "test-function-key")

from fastapi.testclient import TestClient

from app.errors import GraphAPIError, GraphNotFoundError, GraphPermissionError
from app.services.graph_client import GraphClient

HEADERS = {"x-functions-key": FUNCTION_KEY}


def _session_for(graph):
    @asynccontextmanager
    async def _session(settings):
        yield graph
    return _session


def _make_payload(**overrides) -> dict:
    payload = {
        "userPrincipalName": "jane.doe.talent@egg-events.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "personalEmail": "jane@example.com",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def client():
    from app.main import app
    return TestClient(app)


@pytest.fixture()
def graph():
    graph = AsyncMock(spec=GraphClient)
    graph.get_user.return_value = {
        "id": "user-123",
        "userPrincipalName": "jane.doe.talent@egg-events.com",
        "displayName": "Jane Doe",
        "givenName": "Jane",
        "surname": "Doe",
    }
    return graph


class TestResetPasswordSuccess:

    def test_resets_and_emails_new_password(self, client, graph):
        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post(
                "/api/resetFreelancerPassword", json=_make_payload(), headers=HEADERS
            )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["userPrincipalName"] == "jane.doe.talent@egg-events.com"
        new_password = data["newPassword"]
        assert len(new_password) == 16

        graph.get_user.assert_awaited_once()
        assert graph.get_user.await_args.args[0] == "jane.doe.talent@egg-events.com"
        graph.update_password.assert_awaited_once_with("user-123", new_password, force_change=True)

        graph.send_mail.assert_awaited_once()
        sender, message = graph.send_mail.await_args.args
        assert sender == "noreply@egg-events.com"
        assert graph.send_mail.await_args.kwargs["save_to_sent_items"] is False
        assert message["subject"] == "🔑 Your EGG Events Password Has Been Reset"
        assert message["toRecipients"] == [
            {"emailAddress": {"address": "jane@example.com", "name": "Jane Doe"}}
        ]
        assert new_password.replace("&", "&amp;") in message["body"]["content"]

    def test_user_id_is_used_without_upn(self, client, graph):
        payload = _make_payload(userId="user-123")
        del payload["userPrincipalName"]

        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post("/api/resetFreelancerPassword", json=payload, headers=HEADERS)

        assert response.status_code == 200
        assert graph.get_user.await_args.args[0] == "user-123"


class TestResetPasswordValidation:

    def test_missing_identifier(self, client, graph):
        payload = _make_payload()
        del payload["userPrincipalName"]

        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post("/api/resetFreelancerPassword", json=payload, headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: (userPrincipalName OR userId)"
        graph.get_user.assert_not_awaited()

    def test_missing_personal_email(self, client, graph):
        payload = _make_payload()
        del payload["personalEmail"]

        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post("/api/resetFreelancerPassword", json=payload, headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: personalEmail"


class TestResetPasswordErrors:

    def test_unknown_user_returns_404(self, client, graph):
        graph.get_user.side_effect = GraphNotFoundError("Resource does not exist")

        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post(
                "/api/resetFreelancerPassword", json=_make_payload(), headers=HEADERS
            )

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "User not found"
        assert data["details"] == "No user found with identifier: jane.doe.talent@egg-events.com"
        graph.update_password.assert_not_awaited()
        graph.send_mail.assert_not_awaited()

    def test_password_update_denied_returns_403(self, client, graph):
        graph.update_password.side_effect = GraphPermissionError("Insufficient privileges")

        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post(
                "/api/resetFreelancerPassword", json=_make_payload(), headers=HEADERS
            )

        assert response.status_code == 403
        assert response.json()["error"] == "Insufficient permissions to reset passwords."
        graph.send_mail.assert_not_awaited()

    def test_email_failure_still_returns_new_password(self, client, graph):
        graph.send_mail.side_effect = GraphAPIError("Mailbox unavailable", status_code=503)

        with patch("app.routers.passwords.graph_session", _session_for(graph)):
            response = client.post(
                "/api/resetFreelancerPassword", json=_make_payload(), headers=HEADERS
            )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        graph.update_password.assert_awaited_once_with(
            "user-123", data["newPassword"], force_change=True
        )
        graph.send_mail.assert_awaited_once()
