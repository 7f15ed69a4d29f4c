"""
Notifier tests: HTML sanitization, Graph message rendering, send vs notify.
"""

import pytest
from unittest.mock import AsyncMock

from app.errors import GraphAPIError, GraphPermissionError
from app.models.email import MAX_SUBJECT_LENGTH, EmailMessage, Importance, Recipient
from app.services.graph_client import GraphClient
from app.services.notifier import notify, sanitize_html, send_email


def _message(**overrides) -> EmailMessage:
    values = dict(
        subject="Hello",
        body="<p>Hi</p>",
        sender="noreply@egg-events.com",
        recipients=[Recipient(address="someone@example.com")],
    )
    values.update(overrides)
    return EmailMessage(**values)


class TestSanitizeHtml:

    def test_strips_script_block(self):
        assert sanitize_html("<p>Hi</p><script>alert(1)</script>") == "<p>Hi</p>"

    def test_strips_multiline_script_block(self):
        html = "<p>a</p><SCRIPT type='text/javascript'>\nvar x = '<b>';\n</SCRIPT ><p>b</p>"
        assert sanitize_html(html) == "<p>a</p><p>b</p>"

    def test_strips_event_handlers(self):
        assert sanitize_html('<a href="x" onclick="evil()">y</a>') == '<a href="x">y</a>'
        assert sanitize_html("<div onmouseover='evil()'>y</div>") == "<div>y</div>"
        assert sanitize_html("<body onload=evil()>") == "<body>"

    def test_strips_slash_separated_event_handlers(self):
        assert sanitize_html("<svg/onload=alert(1)>") == "<svg/>"
        assert sanitize_html("<img src=x/onerror=alert(1)>") == "<img src=x/>"

    def test_strips_handler_directly_after_quoted_value(self):
        assert sanitize_html('<a href="x"onclick="evil()">y</a>') == '<a href="x">y</a>'

    def test_strips_event_handler_on_img(self):
        assert sanitize_html('<img src="a.png" onerror="evil()">') == '<img src="a.png">'

    def test_text_outside_tags_is_untouched(self):
        text = "<p>Meet once = twice. Learn javascript: the basics.</p>"
        assert sanitize_html(text) == text

    def test_strips_javascript_scheme(self):
        assert sanitize_html('<a href="javascript:alert(1)">x</a>') == '<a href="alert(1)">x</a>'

    def test_strips_data_uri_outside_img(self):
        html = '<a href="data:text/html;base64,PHNjcmlwdD4=">x</a>'
        assert sanitize_html(html) == "<a>x</a>"

    def test_keeps_data_uri_on_img(self):
        html = '<img src="data:image/png;base64,iVBORw0KGgo=">'
        assert sanitize_html(html) == html

    def test_leaves_safe_markup_alone(self):
        html = '<p style="color: red">Hello <strong>world</strong> <a href="https://egg-events.com">link</a></p>'
        assert sanitize_html(html) == html

    def test_empty_input(self):
        assert sanitize_html("") == ""


class TestToGraph:

    def test_minimal_message(self):
        message = _message().to_graph()

        assert message == {
            "subject": "Hello",
            "body": {"contentType": "HTML", "content": "<p>Hi</p>"},
            "toRecipients": [{"emailAddress": {"address": "someone@example.com"}}],
        }

    def test_plain_text_and_from_name(self):
        message = _message(is_html=False, sender_name="EGG Events").to_graph()

        assert message["body"]["contentType"] == "Text"
        assert message["from"] == {
            "emailAddress": {"address": "noreply@egg-events.com", "name": "EGG Events"}
        }

    def test_subject_is_truncated(self):
        message = _message(subject="x" * 300).to_graph()

        assert len(message["subject"]) == MAX_SUBJECT_LENGTH

    def test_cc_bcc_and_importance(self):
        message = _message(
            cc=[Recipient(address="talent@egg-events.com")],
            bcc=[Recipient(address="list@egg-events.com")],
            importance=Importance.HIGH,
        ).to_graph()

        assert message["ccRecipients"] == [{"emailAddress": {"address": "talent@egg-events.com"}}]
        assert message["bccRecipients"] == [{"emailAddress": {"address": "list@egg-events.com"}}]
        assert message["importance"] == "High"


class TestSend:

    @pytest.mark.asyncio
    async def test_send_email_posts_from_sender(self):
        graph = AsyncMock(spec=GraphClient)
        message = _message()

        await send_email(graph, message, save_to_sent_items=True)

        graph.send_mail.assert_awaited_once_with(
            "noreply@egg-events.com", message.to_graph(), save_to_sent_items=True
        )

    @pytest.mark.asyncio
    async def test_send_email_propagates_failures(self):
        graph = AsyncMock(spec=GraphClient)
        graph.send_mail.side_effect = GraphPermissionError("Access is denied")

        with pytest.raises(GraphPermissionError):
            await send_email(graph, _message())

    @pytest.mark.asyncio
    async def test_notify_reports_success(self):
        graph = AsyncMock(spec=GraphClient)

        assert await notify(graph, _message()) is True

    @pytest.mark.asyncio
    async def test_notify_swallows_failures(self):
        graph = AsyncMock(spec=GraphClient)
        graph.send_mail.side_effect = GraphAPIError("Mailbox unavailable", status_code=503)

        assert await notify(graph, _message()) is False
