"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. The reconciler only ever sees its collaborators through
them, which keeps it testable with plain fakes and mocks.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from modules.notifications.models import NotificationKind
from shared.models import AuthenticatedUser

from .models import Identity, Profile, ProfileDefaults, ProfileUpdate

IdentityCallback = Callable[[Optional[Identity]], None]
ProviderErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class IIdentityProvider(Protocol):
    """Push-based stream of identity changes from the identity provider."""

    def subscribe(
        self,
        on_change: IdentityCallback,
        on_error: ProviderErrorCallback,
    ) -> Unsubscribe:
        """
        Start receiving identity changes.

        ``on_change`` is called with the signed-in Identity, or None when
        there is no session. ``on_error`` is called when the provider itself
        is unavailable.

        Returns:
            A callable that stops the subscription
        """
        ...


@runtime_checkable
class IProfileStore(Protocol):
    """Pull-based access to application profiles."""

    async def fetch_profile(self, identity_id: str) -> Profile:
        """
        Fetch the profile for an identity.

        Raises:
            ProfileNotFoundError: No profile exists (first-time sign-in)
            ProfileFetchTransientError: Backend or network failure
        """
        ...

    async def create_profile(self, identity: Identity, defaults: ProfileDefaults) -> Profile:
        """
        Create a profile for a first-time user.

        Raises:
            ProfileAlreadyExistsError: The identity already has a profile
        """
        ...

    async def update_profile(self, identity_id: str, update: ProfileUpdate) -> Profile:
        """
        Apply a partial update to an existing profile.

        Raises:
            ProfileNotFoundError: No profile exists for the identity
        """
        ...

    async def touch_last_login(self, identity_id: str) -> None:
        """Record a sign-in time on the profile."""
        ...


@runtime_checkable
class IAuthStateSink(Protocol):
    """One-way sink for the global application store."""

    def set_identity(self, identity: Optional[Identity]) -> None: ...

    def set_profile(self, profile: Optional[Profile]) -> None: ...

    def set_loading(self, loading: bool) -> None: ...

    def set_initialized(self, initialized: bool) -> None: ...


@runtime_checkable
class INotificationSink(Protocol):
    """Fire-and-forget user notifications."""

    def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        duration_ms: Optional[int] = None,
    ) -> None: ...


@runtime_checkable
class IAuthService(Protocol):
    """Token validation for the HTTP surface."""

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with user ID and basic info

        Raises:
            AuthenticationError: If token is invalid, expired or missing
        """
        ...
