"""
Access gating for protected views.

Consumers read the reconciler's state; guards never write back to it.
"""

from typing import Optional

from pydantic import BaseModel

from modules.notifications.models import NotificationKind
from shared.config import get_settings

from .interfaces import INotificationSink
from .models import AuthState, Identity, Profile
from .reconciler import AuthStateReconciler


class AccessDecision(BaseModel):
    """Outcome of checking whether a protected view may render."""

    allowed: bool
    loading: bool
    is_authenticated: bool
    redirect_to: Optional[str] = None


class ProfileView(BaseModel):
    """Profile-centric projection of the auth state."""

    profile: Optional[Profile] = None
    identity: Optional[Identity] = None
    loading: bool
    is_complete: bool


def profile_view(state: AuthState) -> ProfileView:
    return ProfileView(
        profile=state.profile,
        identity=state.identity,
        loading=state.loading,
        is_complete=state.profile is not None and state.profile.is_complete,
    )


class AuthGuard:
    """
    Gates protected views on the converged auth state.

    While the session is still resolving the decision is "loading". Once it
    has converged without an identity, access is denied with a redirect to
    the sign-in page and a single warning per signed-out episode.
    """

    def __init__(
        self,
        reconciler: AuthStateReconciler,
        notifications: Optional[INotificationSink] = None,
        sign_in_path: Optional[str] = None,
    ):
        self._reconciler = reconciler
        self._notifications = notifications
        self._sign_in_path = sign_in_path or get_settings().sign_in_path
        self._warned = False

    def check(self) -> AccessDecision:
        state = self._reconciler.get_auth_state()

        if not state.initialized or state.loading:
            return AccessDecision(
                allowed=False,
                loading=True,
                is_authenticated=state.is_authenticated,
            )

        if state.is_authenticated:
            self._warned = False
            return AccessDecision(allowed=True, loading=False, is_authenticated=True)

        if not self._warned and self._notifications is not None:
            self._notifications.notify(
                NotificationKind.WARNING,
                "Sign-in required",
                "Please sign in to access this page.",
            )
        self._warned = True
        return AccessDecision(
            allowed=False,
            loading=False,
            is_authenticated=False,
            redirect_to=self._sign_in_path,
        )
