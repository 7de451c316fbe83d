"""Pydantic models for API request/response.

Request fields are optional at the schema level so that a missing field
reaches the account service and is reported as a 400 validation error
with a domain message, rather than as a schema error.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request model for user registration."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    dob: Optional[date] = Field(None, description="Date of birth, YYYY-MM-DD")


class SignupResponse(BaseModel):
    success: bool = True
    message: str


class LoginRequest(BaseModel):
    """Request model for user login."""
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    token: str


class ProfileResponse(BaseModel):
    """Public profile. The password hash is never part of this model."""
    username: str
    email: str
    dob: date
    super_coin_bal: int


class UpdateProfileRequest(BaseModel):
    """Request model for profile update; JSON key for the new name is newUsername."""
    model_config = ConfigDict(populate_by_name=True)

    new_username: Optional[str] = Field(None, alias="newUsername")
    email: Optional[str] = None
    dob: Optional[date] = None


class MessageResponse(BaseModel):
    message: str
