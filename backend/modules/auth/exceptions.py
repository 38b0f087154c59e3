"""
Authentication module exceptions.

Token errors are raised by the auth service and caught by the API layer.
Profile and provider errors are raised by the Supabase collaborators and
converted into AuthState fields by the reconciler.
"""

from typing import Optional

from shared.exceptions import (
    FolioError,
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
)


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class AuthNotConfiguredError(AuthenticationError):
    """Raised when the server has no JWT secret to validate tokens with."""

    def __init__(self, message: str = "Server authentication not configured"):
        super().__init__(message, code="AUTH_NOT_CONFIGURED")


class ProfileNotFoundError(NotFoundError):
    """
    Raised when no profile exists for an identity.

    Expected for a first-time sign-in; not an error from the user's view.
    """

    def __init__(self, identity_id: str):
        super().__init__(
            f"Profile not found: {identity_id}",
            code="PROFILE_NOT_FOUND",
            details={"identity_id": identity_id},
        )


class ProfileFetchTransientError(ExternalServiceError):
    """Raised when the profile store fails for a backend or network reason."""

    def __init__(self, identity_id: str, reason: Optional[str] = None):
        message = f"Failed to load profile for {identity_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            service="profiles",
            code="PROFILE_FETCH_FAILED",
            details={"identity_id": identity_id},
        )


class ProfileAlreadyExistsError(ConflictError):
    """Raised when creating a profile for an identity that already has one."""

    def __init__(self, identity_id: str):
        super().__init__(
            f"Profile already exists: {identity_id}",
            code="PROFILE_EXISTS",
            details={"identity_id": identity_id},
        )


class ProviderUnavailableError(ExternalServiceError):
    """Raised when the identity provider is unreachable or misconfigured."""

    def __init__(self, message: str = "Identity provider unavailable"):
        super().__init__(message, service="supabase_auth", code="PROVIDER_UNAVAILABLE")


class StaleResultError(FolioError):
    """
    A profile fetch resolved after a newer identity event superseded it.

    Internal to the reconciler; never surfaced to users.
    """

    def __init__(self, identity_id: str, generation: int, current_generation: int):
        super().__init__(
            f"Discarding stale profile result for {identity_id}",
            code="STALE_RESULT",
            details={
                "identity_id": identity_id,
                "generation": generation,
                "current_generation": current_generation,
            },
        )
