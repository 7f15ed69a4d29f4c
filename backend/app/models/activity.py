"""
Pydantic models for the activity-check webhook.

The webhook is called by the Logic App behind the actionable "Are you still
working with us?" email: the supplier clicks Yes or No and the Logic App
forwards the answer along with the identifiers it already holds.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ActivityAnswer(str, Enum):
    YES = "yes"
    NO = "no"


class ActivityAction(str, Enum):
    ACTIVITY_CONFIRMED = "activity_confirmed"
    LICENSE_REMOVED = "license_removed"


class ActivityResponseRequest(BaseModel):
    """Request body for POST /api/handleActivityResponse."""
    model_config = {"populate_by_name": True}

    response: ActivityAnswer
    supplier_email: NonEmptyStr = Field(alias="supplierEmail")
    supplier_name: Optional[str] = Field(default=None, alias="supplierName")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    entra_object_id: NonEmptyStr = Field(alias="entraObjectId")
    sharepoint_item_id: NonEmptyStr = Field(alias="sharePointItemId")
    requested_by_email: Optional[str] = Field(default=None, alias="requestedByEmail")

    @field_validator("response", mode="before")
    @classmethod
    def _normalize_response(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            # Let the standard "missing" handling report it
            raise PydanticCustomError("string_too_short", "Field required")
        normalized = str(value).strip().lower()
        if normalized not in {a.value for a in ActivityAnswer}:
            raise PydanticCustomError(
                "invalid_response",
                "Invalid response value: {value}. Expected 'yes' or 'no'.",
                {"value": value},
            )
        return normalized

    @field_validator("sharepoint_item_id", mode="before")
    @classmethod
    def _coerce_item_id(cls, value):
        # Logic Apps send list item IDs as numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def display_name(self) -> str:
        return self.supplier_name or self.supplier_email


class ActivityResponseResult(BaseModel):
    success: bool = True
    action: ActivityAction
    message: str
    timestamp: str
