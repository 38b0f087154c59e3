"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together module
implementations. Routes depend on interfaces; this file creates the
concrete implementations.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.auth.repository import ProfileRepository


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._profile_repository: "ProfileRepository | None" = None

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import get_auth_service
            self._auth_service = get_auth_service()
        return self._auth_service

    @property
    def profiles(self) -> "ProfileRepository":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            from modules.auth.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    def reset(self) -> None:
        """Reset all cached services."""
        self._auth_service = None
        self._profile_repository = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_profile_repository() -> "ProfileRepository":
    """FastAPI dependency for profile repository."""
    return get_container().profiles
