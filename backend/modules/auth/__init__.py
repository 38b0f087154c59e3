"""
Authentication module.

Handles JWT validation, profile storage, and reconciliation of the
identity-provider stream with the profile store into one AuthState.

Public API:
- AuthStateReconciler: Converges identity + profile into AuthState
- AuthSession: Reconciler wired to its collaborators for one session
- AuthGuard, ProfileView: Read-only projections for protected views
- IIdentityProvider, IProfileStore, IAuthStateSink, INotificationSink, IAuthService
- Models: Identity, Profile, ProfilePreferences, AuthState, ...
- Exceptions: ProfileNotFoundError, ProfileFetchTransientError, ...
"""

from .interfaces import (
    IAuthService,
    IAuthStateSink,
    IIdentityProvider,
    INotificationSink,
    IProfileStore,
)
from .models import (
    AuthErrorKind,
    AuthState,
    AuthStatus,
    DashboardLayout,
    DefaultMarket,
    Identity,
    NotificationSettings,
    Profile,
    ProfileDefaults,
    ProfilePreferences,
    ProfileUpdate,
)
from .exceptions import (
    AuthNotConfiguredError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    ProfileAlreadyExistsError,
    ProfileFetchTransientError,
    ProfileNotFoundError,
    ProviderUnavailableError,
    StaleResultError,
)
from .reconciler import AuthStateReconciler
from .guards import AccessDecision, AuthGuard, ProfileView, profile_view
from .store import SessionSnapshot, SessionStore
from .session import AuthSession, create_auth_session

__all__ = [
    # Interfaces
    "IAuthService",
    "IAuthStateSink",
    "IIdentityProvider",
    "INotificationSink",
    "IProfileStore",
    # Models
    "AuthErrorKind",
    "AuthState",
    "AuthStatus",
    "DashboardLayout",
    "DefaultMarket",
    "Identity",
    "NotificationSettings",
    "Profile",
    "ProfileDefaults",
    "ProfilePreferences",
    "ProfileUpdate",
    # Exceptions
    "AuthNotConfiguredError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "ProfileAlreadyExistsError",
    "ProfileFetchTransientError",
    "ProfileNotFoundError",
    "ProviderUnavailableError",
    "StaleResultError",
    # Reconciliation
    "AuthStateReconciler",
    "AccessDecision",
    "AuthGuard",
    "ProfileView",
    "profile_view",
    "SessionSnapshot",
    "SessionStore",
    "AuthSession",
    "create_auth_session",
]
