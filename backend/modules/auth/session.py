"""
Session wiring.

Composes the reconciler with its collaborators for one session lifecycle:
identity provider, profile store, global store and notification center.
"""

from typing import Optional

from supabase import Client

from modules.notifications.center import NotificationCenter

from .guards import AuthGuard, ProfileView, profile_view
from .interfaces import IIdentityProvider, IProfileStore
from .models import AuthState
from .provider import create_identity_provider
from .reconciler import AuthStateReconciler
from .repository import ProfileRepository
from .store import SessionStore


class AuthSession:
    """
    One auth session: start on enter, tear down on exit.

    Usage:
        async with AuthSession(provider, profiles) as session:
            state = await session.reconciler.wait_until_initialized()
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        profiles: IProfileStore,
        store: Optional[SessionStore] = None,
        notifications: Optional[NotificationCenter] = None,
    ):
        self.profiles = profiles
        self.store = store or SessionStore()
        self.notifications = notifications or NotificationCenter()
        self.reconciler = AuthStateReconciler(
            provider=provider,
            profiles=profiles,
            store=self.store,
            notifications=self.notifications,
        )
        self.guard = AuthGuard(self.reconciler, self.notifications)

    @property
    def state(self) -> AuthState:
        return self.reconciler.get_auth_state()

    def profile_view(self) -> ProfileView:
        return profile_view(self.state)

    def start(self) -> None:
        self.reconciler.start()

    def close(self) -> None:
        self.reconciler.stop()
        self.store.reset()

    async def __aenter__(self) -> "AuthSession":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_auth_session(client: Client, profiles_client: Optional[Client] = None) -> AuthSession:
    """
    Build an AuthSession on top of Supabase.

    Args:
        client: Client whose auth events drive the session
        profiles_client: Client used for profile queries (defaults to client)
    """
    return AuthSession(
        provider=create_identity_provider(client),
        profiles=ProfileRepository(profiles_client or client),
    )
