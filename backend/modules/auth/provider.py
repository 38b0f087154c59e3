"""
Identity providers backed by Supabase Auth.
"""

import logging
from typing import Any, Optional

from supabase import Client

from shared.database import get_supabase_user_client, is_supabase_configured

from .exceptions import ProviderUnavailableError
from .interfaces import IdentityCallback, ProviderErrorCallback, Unsubscribe
from .models import Identity

logger = logging.getLogger(__name__)


def _identity_from_session(session: Any) -> Optional[Identity]:
    if session is None or getattr(session, "user", None) is None:
        return None
    return Identity.from_supabase_user(session.user)


class SupabaseIdentityProvider:
    """
    Identity stream over a Supabase client's auth-state events.

    The current session is emitted first, followed by every auth-state
    change (SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED, USER_UPDATED, ...).
    """

    def __init__(self, client: Client):
        self._client = client

    def subscribe(
        self,
        on_change: IdentityCallback,
        on_error: ProviderErrorCallback,
    ) -> Unsubscribe:
        def handle(event: str, session: Any) -> None:
            logger.debug(f"Supabase auth event: {event}")
            on_change(_identity_from_session(session))

        try:
            subscription = self._client.auth.on_auth_state_change(handle)
        except Exception as e:
            on_error(ProviderUnavailableError(f"Identity provider unavailable: {e}"))
            return lambda: None

        try:
            session = self._client.auth.get_session()
        except Exception as e:
            # Keep listening: a later auth event can still recover the session
            on_error(ProviderUnavailableError(f"Identity provider unavailable: {e}"))
        else:
            on_change(_identity_from_session(session))
        return subscription.unsubscribe


class UnavailableIdentityProvider:
    """Stand-in used when Supabase Auth is not configured."""

    def __init__(self, reason: str = "Supabase Auth is not configured"):
        self._reason = reason

    def subscribe(
        self,
        on_change: IdentityCallback,
        on_error: ProviderErrorCallback,
    ) -> Unsubscribe:
        on_error(ProviderUnavailableError(self._reason))
        return lambda: None


def create_identity_provider(
    client: Optional[Client] = None,
) -> SupabaseIdentityProvider | UnavailableIdentityProvider:
    """
    Build the identity provider for a session.

    Falls back to UnavailableIdentityProvider when no client is given and
    Supabase is not configured, so the app runs in signed-out mode.
    """
    if client is not None:
        return SupabaseIdentityProvider(client)
    if not is_supabase_configured():
        logger.warning("Supabase is not configured; running in signed-out mode")
        return UnavailableIdentityProvider()
    try:
        return SupabaseIdentityProvider(get_supabase_user_client())
    except RuntimeError as e:
        return UnavailableIdentityProvider(str(e))
