"""Profile routes for the authenticated user."""

import asyncio

from fastapi import APIRouter, Depends

from api.dependencies import get_user_repo
from api.models import MessageResponse, ProfileResponse, UpdateProfileRequest
from api.security import get_current_identity
from domain.model.user import Identity
from port.user_repository import UserRepository
from services import account_service

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/user", response_model=ProfileResponse)
async def get_user(
    identity: Identity = Depends(get_current_identity),
    repo: UserRepository = Depends(get_user_repo),
):
    """Return the profile of the token's user (no password)."""
    profile = await asyncio.to_thread(account_service.get_profile, repo, identity.username)
    return ProfileResponse(
        username=profile.username,
        email=profile.email,
        dob=profile.dob,
        super_coin_bal=profile.super_coin_bal,
    )


@router.put("/user", response_model=MessageResponse)
async def update_user(
    request: UpdateProfileRequest,
    identity: Identity = Depends(get_current_identity),
    repo: UserRepository = Depends(get_user_repo),
):
    """Rename the user and overwrite email/dob when given.

    The bearer token is not reissued: it keeps the old username until it
    expires, so the client must log in again to act under the new name.
    """
    profile = await asyncio.to_thread(
        account_service.update_profile,
        repo,
        identity.username,
        request.new_username,
        email=request.email,
        dob=request.dob,
    )
    # Only this request sees the new name
    identity.username = profile.username
    return MessageResponse(message="Profile updated successfully")
