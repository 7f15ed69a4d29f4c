"""
Pydantic models for outbound mail.

Models:
  EmailMessage       provider-agnostic message handed to the notifier
  SendEmailRequest   request body for POST /api/sendEmail
  SendEmailResponse  response body for POST /api/sendEmail
"""

from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from app.config import get_settings

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Graph rejects longer subjects on some clients; trimmed before sending
MAX_SUBJECT_LENGTH = 255


class Importance(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class Recipient(BaseModel):
    address: str
    name: Optional[str] = None


class EmailMessage(BaseModel):
    """
    A message ready to be sent on behalf of `sender`.

    body is sent as-is: callers are responsible for sanitizing free-form
    HTML before building the message.
    """
    subject: str
    body: str
    is_html: bool = True
    sender: str
    sender_name: Optional[str] = None
    recipients: List[Recipient]
    cc: List[Recipient] = []
    bcc: List[Recipient] = []
    importance: Optional[Importance] = None

    def to_graph(self) -> dict:
        """Render as the `message` object of Graph's sendMail action."""
        message: dict = {
            "subject": self.subject[:MAX_SUBJECT_LENGTH],
            "body": {
                "contentType": "HTML" if self.is_html else "Text",
                "content": self.body,
            },
            "toRecipients": [_graph_address(r) for r in self.recipients],
        }
        if self.sender_name:
            message["from"] = _graph_address(
                Recipient(address=self.sender, name=self.sender_name)
            )
        if self.cc:
            message["ccRecipients"] = [_graph_address(r) for r in self.cc]
        if self.bcc:
            message["bccRecipients"] = [_graph_address(r) for r in self.bcc]
        if self.importance:
            message["importance"] = self.importance.value
        return message


def _graph_address(recipient: Recipient) -> dict:
    email_address = {"address": recipient.address}
    if recipient.name:
        email_address["name"] = recipient.name
    return {"emailAddress": email_address}


class SendEmailRequest(BaseModel):
    """Request body for POST /api/sendEmail."""
    model_config = {"populate_by_name": True}

    recipients: List[NonEmptyStr] = Field(min_length=1)
    sender: NonEmptyStr = Field(alias="from")
    from_name: Optional[str] = Field(default=None, alias="fromName")
    subject: NonEmptyStr
    body: NonEmptyStr
    is_html: bool = Field(alias="isHtml")

    @field_validator("recipients")
    @classmethod
    def _cap_recipients(cls, value: List[str]) -> List[str]:
        max_recipients = get_settings().max_recipients
        if len(value) > max_recipients:
            raise PydanticCustomError(
                "too_many_recipients",
                "Maximum {max_recipients} recipients allowed per email",
                {"max_recipients": max_recipients},
            )
        return value


class SendEmailResponse(BaseModel):
    success: bool = True
    message: str
    recipientCount: int
    timestamp: str
