"""
Pydantic models for the license (E1 group membership) endpoint.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class LicenseAction(str, Enum):
    ADDED = "added"
    REMOVED = "removed"


class LicenseRequest(BaseModel):
    """
    Request body for POST /api/manageLicense.

    userEmail is the partner's personal email. entraUPN / entraObjectId are
    sent once the partner already exists in Entra ID and make the lookup a
    single point read instead of a filtered search.
    """
    model_config = {"populate_by_name": True}

    user_email: NonEmptyStr = Field(alias="userEmail")
    entra_upn: Optional[str] = Field(default=None, alias="entraUPN")
    entra_object_id: Optional[str] = Field(default=None, alias="entraObjectId")
    first_name: NonEmptyStr = Field(alias="firstName")
    last_name: NonEmptyStr = Field(alias="lastName")
    is_active: bool = Field(alias="isActive")


class LicenseResponse(BaseModel):
    success: bool = True
    action: LicenseAction
    message: str
    userPrincipalName: Optional[str] = None
    userId: str
    timestamp: str
