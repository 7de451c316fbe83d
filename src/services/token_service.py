"""Bearer token issuing and verification.

Tokens are HS256 JWTs carrying the username and a fixed one-hour expiry.
They are not stored anywhere and cannot be revoked before they expire.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(hours=1)


def issue_token(
    username: str,
    secret: str,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> str:
    """Create a signed token for username, valid for TOKEN_LIFETIME from now."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "username": username,
        "exp": issued_at + TOKEN_LIFETIME,
        "iat": issued_at,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> Optional[str]:
    """Verify signature and expiry and return the username claim.

    Pure computation, no I/O. Returns None for any invalid, tampered,
    expired or claim-less token.
    """
    try:
        # Expiry is checked below against `now` so callers can pin the clock
        payload = jwt.decode(token, secret, algorithms=[algorithm], options={"verify_exp": False})
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    current = now or datetime.now(timezone.utc)
    if current.timestamp() >= exp:
        logger.debug("JWT expired")
        return None

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        return None
    return username
