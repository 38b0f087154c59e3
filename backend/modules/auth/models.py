"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface:

- Identity: the provider-issued user record (read-only here)
- Profile: the application-owned per-user settings record
- AuthState: the converged, in-memory view produced by the reconciler
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.config import get_settings


# -----------------------------------------------------------------------------
# Identity
# -----------------------------------------------------------------------------


class Identity(BaseModel):
    """
    Authenticated user record issued by the identity provider.

    Owned by Supabase Auth; this system only reads it.
    """

    id: str = Field(..., description="Provider user ID (UUID)")
    email: Optional[str] = Field(None, description="User's email")
    display_name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    model_config = {"frozen": True}

    @classmethod
    def from_supabase_user(cls, user: Any) -> "Identity":
        """Build an Identity from a Supabase Auth ``User`` object."""
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            display_name=metadata.get("display_name") or metadata.get("full_name"),
            avatar_url=metadata.get("avatar_url"),
            email_verified=getattr(user, "email_confirmed_at", None) is not None,
        )


# -----------------------------------------------------------------------------
# Profile preferences
# -----------------------------------------------------------------------------


class _PreferenceModel(BaseModel):
    """Base for preference sections: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class DashboardLayout(_PreferenceModel):
    layout: Literal["grid", "list"] = "grid"
    columns: int = Field(default=2, ge=1, le=4)


class DefaultMarket(_PreferenceModel):
    market: str = "tw"


class NotificationSettings(_PreferenceModel):
    email: bool = True
    push: bool = False
    risk_alerts: bool = True


class ProfilePreferences(_PreferenceModel):
    """
    User preferences stored with the profile.

    Only the recognized sections below are kept. Unrecognized keys in
    stored rows are dropped on load.
    """

    dashboard_layout: DashboardLayout = Field(default_factory=DashboardLayout)
    default_market: DefaultMarket = Field(default_factory=DefaultMarket)
    notification_settings: NotificationSettings = Field(default_factory=NotificationSettings)


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------


class Profile(BaseModel):
    """
    Application-level profile keyed by identity ID.

    Created on first sign-in, then read and occasionally updated by the user.
    """

    id: str = Field(..., description="Identity ID this profile belongs to")
    email: Optional[str] = Field(None, description="Email at creation time")
    display_name: str = Field(default="", description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    timezone: str = Field(default="", description="IANA timezone name")
    preferred_currency: str = Field(default="", description="ISO currency code")
    email_verified: bool = Field(default=False)
    preferences: ProfilePreferences = Field(default_factory=ProfilePreferences)
    created_at: Optional[datetime] = Field(None, description="Profile creation time")
    last_login_at: Optional[datetime] = Field(None, description="Last sign-in time")

    model_config = {"extra": "ignore"}

    @property
    def is_complete(self) -> bool:
        """Whether the user has filled in the required profile fields."""
        return bool(self.display_name and self.timezone and self.preferred_currency)


class ProfileDefaults(BaseModel):
    """Values used when creating a profile for a first-time user."""

    display_name: Optional[str] = None
    timezone: str = Field(default_factory=lambda: get_settings().default_timezone)
    preferred_currency: str = Field(default_factory=lambda: get_settings().default_currency)
    preferences: ProfilePreferences = Field(
        default_factory=lambda: ProfilePreferences(
            default_market=DefaultMarket(market=get_settings().default_market)
        )
    )


class ProfileUpdate(BaseModel):
    """Partial profile update. Unknown keys are rejected."""

    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = None
    timezone: Optional[str] = Field(None, min_length=1)
    preferred_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    preferences: Optional[ProfilePreferences] = None

    model_config = {"extra": "forbid"}


# -----------------------------------------------------------------------------
# Auth state
# -----------------------------------------------------------------------------


class AuthErrorKind(str, Enum):
    """User-visible failure categories carried in AuthState.error."""

    PROFILE_FETCH_TRANSIENT = "profile_fetch_transient"
    PROVIDER_UNAVAILABLE = "provider_unavailable"


class AuthStatus(str, Enum):
    """Phase of the per-session auth state machine."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    SIGNED_OUT = "signed_out"
    SIGNED_IN_NO_PROFILE = "signed_in_no_profile"
    SIGNED_IN_WITH_PROFILE = "signed_in_with_profile"
    ERROR = "error"


class AuthState(BaseModel):
    """
    Converged view of who is signed in and what their profile is.

    Instances are immutable; the reconciler replaces the whole value on
    every transition so consumers can compare snapshots with ``==``.
    """

    identity: Optional[Identity] = None
    profile: Optional[Profile] = None
    loading: bool = False
    error: Optional[AuthErrorKind] = None
    error_message: Optional[str] = None
    initialized: bool = False
    status: AuthStatus = AuthStatus.UNINITIALIZED

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_new_user(self) -> bool:
        """Signed in, resolved, and no profile exists yet."""
        return self.status == AuthStatus.SIGNED_IN_NO_PROFILE

    @property
    def sign_in_enabled(self) -> bool:
        """Sign-in/sign-up actions are disabled while the provider is down."""
        return self.error != AuthErrorKind.PROVIDER_UNAVAILABLE

    @property
    def converged(self) -> bool:
        return self.initialized and not self.loading
