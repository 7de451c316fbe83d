"""Health check endpoint."""

import asyncio
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request):
    """Health check endpoint with user store status."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    store = getattr(request.app.state, "user_store", None)
    if store is None:
        database = {"status": "unhealthy", "backend": None, "message": "Store not opened"}
    elif await asyncio.to_thread(store.ping):
        database = {"status": "healthy", "backend": store.backend, "message": "Connection successful"}
    else:
        database = {"status": "unhealthy", "backend": store.backend, "message": "Connection failed"}

    health_status["services"]["database"] = database
    if database["status"] != "healthy":
        health_status["status"] = "unhealthy"
        logger.warning("Health check failed", extra={"database": database})
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status)

    return health_status
