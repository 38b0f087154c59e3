"""API models package."""

from .errors import ErrorResponse
from .user import CreateProfileRequest, MeResponse

__all__ = [
    "ErrorResponse",
    "CreateProfileRequest",
    "MeResponse",
]
