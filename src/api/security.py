"""Bearer token authentication dependency for protected routes."""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from domain.model.user import Identity
from services.token_service import verify_token
from utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Verify the bearer token and attach the identity to the request.

    Verification is purely cryptographic; the store is not consulted here.

    Raises:
        HTTPException: 401 if no bearer token was sent, 403 if it does not verify
    """
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    username = verify_token(
        credentials.credentials,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    if not username:
        logger.info("Rejected bearer token", extra={"path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    identity = Identity(username=username)
    request.state.identity = identity
    return identity
