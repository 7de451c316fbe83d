"""Authentication routes (signup, login)."""

import asyncio

from fastapi import APIRouter, Depends, status

from api.dependencies import get_user_repo
from api.models import LoginRequest, LoginResponse, SignupRequest, SignupResponse
from port.user_repository import UserRepository
from services import account_service
from utils.config import Settings, get_settings

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Register a new user.

    Raises:
        ValidationError: 400 if a field is missing
        DuplicateUserError: 409 if the username (or email) is taken
    """
    # bcrypt and the store are blocking; keep them off the event loop
    await asyncio.to_thread(
        account_service.signup,
        repo,
        request.username,
        request.email,
        request.password,
        request.dob,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    return SignupResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and return a bearer token valid for one hour.

    Raises:
        ValidationError: 400 if username or password is missing
        InvalidCredentialsError: 401 for unknown user or wrong password alike
    """
    token = await asyncio.to_thread(
        account_service.login,
        repo,
        request.username,
        request.password,
        settings.jwt_secret_key,
        settings.jwt_algorithm,
    )
    return LoginResponse(token=token)
