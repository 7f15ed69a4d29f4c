"""
Outbound mail via Graph's sendMail action.

Two entry points:
  send_email  raises on failure; use when sending IS the requested action
  notify      logs and swallows failures; use when the mail is a side
                effect of a change that has already been committed

sanitize_html is a pattern-based, best-effort filter for caller-supplied
bodies. It is not a parser-based HTML sanitizer and internally rendered
templates do not go through it.
"""

import logging
import re

from app.models.email import EmailMessage
from app.services.graph_client import GraphClient

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script\s*>", re.IGNORECASE)
# Attributes may be separated by whitespace, "/" or directly follow a closing quote
_EVENT_HANDLER = re.compile(
    r"""(?:\s+|(?<=[/"']))on\w+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+)""",
    re.IGNORECASE,
)
_JAVASCRIPT_SCHEME = re.compile(r"javascript\s*:", re.IGNORECASE)
_DATA_ATTRIBUTE = re.compile(
    r"""(?:\s+|(?<=[/"']))[\w:-]+\s*=\s*(?:"\s*data:[^"]*"|'\s*data:[^']*'|data:[^\s>]*)""",
    re.IGNORECASE,
)
# Opening tags only; text between tags is never rewritten
_OPENING_TAG = re.compile(r"<([a-z][^>]*)>", re.IGNORECASE)
_IMG_TAG = re.compile(r"img\b", re.IGNORECASE)


def _clean_tag(match: re.Match) -> str:
    tag = _EVENT_HANDLER.sub("", match.group(1))
    tag = _JAVASCRIPT_SCHEME.sub("", tag)
    if not _IMG_TAG.match(tag):
        tag = _DATA_ATTRIBUTE.sub("", tag)
    return "<" + tag + ">"


def sanitize_html(html: str) -> str:
    """
    Strip the obvious injection vectors from caller-supplied HTML.

    Removes <script> blocks, then inside every opening tag removes on*
    event handlers, javascript: schemes and (except on <img>) data: URIs.
    Text content is left as is.
    """
    if not html:
        return ""

    sanitized = _SCRIPT_BLOCK.sub("", html)
    return _OPENING_TAG.sub(_clean_tag, sanitized)


async def send_email(
    graph: GraphClient,
    message: EmailMessage,
    save_to_sent_items: bool = False,
) -> None:
    """Send `message` from message.sender. Raises GraphAPIError on failure."""
    logger.info(
        f"Sending email '{message.subject[:80]}' from {message.sender} "
        f"to {len(message.recipients)} recipient(s)"
    )
    await graph.send_mail(message.sender, message.to_graph(), save_to_sent_items=save_to_sent_items)
    logger.info("Email sent successfully")


async def notify(
    graph: GraphClient,
    message: EmailMessage,
    save_to_sent_items: bool = False,
) -> bool:
    """
    Best-effort send. Returns True when the mail was accepted by Graph.

    Failures are logged and swallowed so they never change the outcome of the
    operation that triggered the notification.
    """
    try:
        await send_email(graph, message, save_to_sent_items=save_to_sent_items)
        return True
    except Exception as e:
        recipients = ", ".join(r.address for r in message.recipients)
        logger.error(f"Failed to send notification '{message.subject}' to {recipients}: {e}")
        return False
