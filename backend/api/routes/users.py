"""
User-related endpoints.

Provides the current user's profile, plus creation of the profile on
sign-up and partial updates afterwards.
"""

from fastapi import APIRouter, Depends, HTTPException

from modules.auth.exceptions import (
    ProfileAlreadyExistsError,
    ProfileFetchTransientError,
    ProfileNotFoundError,
)
from modules.auth.models import Identity, Profile, ProfileDefaults, ProfileUpdate
from modules.auth.repository import ProfileRepository
from shared.models import AuthenticatedUser

from ..dependencies import get_profile_repository
from ..middleware.auth import get_current_user
from ..models.errors import ErrorResponse
from ..models.user import CreateProfileRequest, MeResponse

router = APIRouter()


def _identity_from_user(user: AuthenticatedUser) -> Identity:
    return Identity(id=user.id, email=user.email, email_verified=user.email_verified)


@router.get(
    "/me",
    response_model=MeResponse,
    responses={503: {"model": ErrorResponse}},
)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> MeResponse:
    """
    Get the current user's identity and profile.

    A missing profile is not an error: it means the user is new.
    """
    try:
        profile = await profiles.get_profile(user.id)
    except ProfileFetchTransientError as e:
        raise HTTPException(status_code=503, detail=e.message)

    return MeResponse(
        id=user.id,
        email=user.email,
        email_verified=user.email_verified,
        role=user.role,
        profile=profile,
        is_new_user=profile is None,
        profile_complete=profile is not None and profile.is_complete,
    )


@router.post(
    "/me/profile",
    response_model=Profile,
    status_code=201,
    responses={409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_profile(
    request: CreateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """
    Create the current user's profile on first sign-in.
    """
    overrides = request.model_dump(exclude_none=True)
    defaults = ProfileDefaults(**overrides)
    try:
        return await profiles.create_profile(_identity_from_user(user), defaults)
    except ProfileAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except ProfileFetchTransientError as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.patch(
    "/me/profile",
    response_model=Profile,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def update_profile(
    update: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """
    Update fields of the current user's profile.
    """
    try:
        return await profiles.update_profile(user.id, update)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ProfileFetchTransientError as e:
        raise HTTPException(status_code=503, detail=e.message)
