"""
Global session store.

Holds the auth snapshot that the rest of the application reads. It is
written only by the reconciler through IAuthStateSink.
"""

from typing import Optional

from pydantic import BaseModel

from .models import Identity, Profile


class SessionSnapshot(BaseModel):
    """Point-in-time copy of the session store."""

    identity: Optional[Identity] = None
    profile: Optional[Profile] = None
    is_authenticated: bool = False
    is_loading: bool = True
    is_initialized: bool = False


class SessionStore:
    """In-process application store fed by the reconciler."""

    def __init__(self) -> None:
        self.identity: Optional[Identity] = None
        self.profile: Optional[Profile] = None
        self.is_loading = True
        self.is_initialized = False

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def set_identity(self, identity: Optional[Identity]) -> None:
        self.identity = identity

    def set_profile(self, profile: Optional[Profile]) -> None:
        self.profile = profile

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def set_initialized(self, initialized: bool) -> None:
        self.is_initialized = initialized

    def reset(self) -> None:
        """Clear everything, e.g. on tab teardown."""
        self.identity = None
        self.profile = None
        self.is_loading = False
        self.is_initialized = False

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            identity=self.identity,
            profile=self.profile,
            is_authenticated=self.is_authenticated,
            is_loading=self.is_loading,
            is_initialized=self.is_initialized,
        )
