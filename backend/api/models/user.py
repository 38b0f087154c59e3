"""
User models for the users endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field

from modules.auth.models import Profile, ProfilePreferences


class MeResponse(BaseModel):
    """Current user's identity claims and profile."""

    id: str
    email: str
    email_verified: bool
    role: str
    profile: Optional[Profile] = None
    is_new_user: bool = Field(..., description="True when no profile exists yet")
    profile_complete: bool = False


class CreateProfileRequest(BaseModel):
    """Values chosen during sign-up. Omitted fields use server defaults."""

    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    timezone: Optional[str] = Field(None, min_length=1)
    preferred_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    preferences: Optional[ProfilePreferences] = None

    model_config = {"extra": "forbid"}
