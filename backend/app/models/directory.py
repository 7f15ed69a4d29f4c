"""
Pydantic models for directory entities.

None of these are persisted locally; the authoritative copy of every
record lives in Entra ID / SharePoint.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class IdentityHints(BaseModel):
    """
    Everything a caller knows about a user, in the order it is tried.

    At least one hint must be set for resolution to have anything to look up;
    uniqueness is left to the directory.
    """
    object_id: Optional[str] = None       # Entra object ID (fastest lookup)
    principal_name: Optional[str] = None  # UPN, e.g. jane.doe.talent@egg-events.com
    email: Optional[str] = None           # personal / contact email

    def is_empty(self) -> bool:
        return not (self.object_id or self.principal_name or self.email)


class UserRecord(BaseModel):
    """Canonical directory user as returned by Graph (or synthesized from an invitation)."""
    model_config = {"populate_by_name": True, "extra": "ignore"}

    id: str
    principal_name: Optional[str] = Field(default=None, alias="userPrincipalName")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    contact_email: Optional[str] = Field(default=None, alias="mail")


class ExternalRecord(BaseModel):
    """A SharePoint list item targeted by a partial (PATCH) update."""
    site_id: str
    list_id: str
    item_id: str
    fields: Dict[str, Any] = {}
