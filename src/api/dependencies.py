from fastapi import HTTPException, Request

from adapter.factory import UserStore
from port.user_repository import UserRepository


def get_user_store(request: Request) -> UserStore:
    """Return the store opened at startup, raising 503 if it is unavailable."""
    store = getattr(request.app.state, "user_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return store


def get_user_repo(request: Request) -> UserRepository:
    return get_user_store(request).repo
