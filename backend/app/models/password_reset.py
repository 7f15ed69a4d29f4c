"""
Pydantic models for the password reset endpoint.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, model_validator
from pydantic_core import PydanticCustomError

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ResetPasswordRequest(BaseModel):
    """
    Request body for POST /api/resetFreelancerPassword.

    Either userPrincipalName (preferred) or userId identifies the account.
    """
    model_config = {"populate_by_name": True}

    user_principal_name: Optional[str] = Field(default=None, alias="userPrincipalName")
    user_id: Optional[str] = Field(default=None, alias="userId")
    first_name: NonEmptyStr = Field(alias="firstName")
    last_name: NonEmptyStr = Field(alias="lastName")
    personal_email: NonEmptyStr = Field(alias="personalEmail")

    @model_validator(mode="after")
    def _require_identifier(self) -> "ResetPasswordRequest":
        if not (self.user_principal_name or self.user_id):
            raise PydanticCustomError(
                "missing_identifier",
                "Either userPrincipalName or userId is required",
            )
        return self

    @property
    def identifier(self) -> str:
        return self.user_principal_name or self.user_id

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ResetPasswordResponse(BaseModel):
    success: bool = True
    # Returned so the caller (SharePoint flow) can store it; see DESIGN.md
    newPassword: str
    userPrincipalName: Optional[str] = None
    timestamp: str
