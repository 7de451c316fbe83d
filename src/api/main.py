"""FastAPI application entry point."""

import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapter.factory import open_user_store
from api.errors import register_exception_handlers
from api.routes import auth, health, users
from domain.model.errors import StorageError
from utils.config import get_settings
from utils.logging import setup_structured_logging

settings = get_settings()

# Set up structured JSON logging
setup_structured_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = Path(__file__).resolve().parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Account Service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the user store at startup and close it at shutdown."""
    app.state.user_store = None
    try:
        app.state.user_store = open_user_store(settings)
    except StorageError as e:
        # Keep serving; store-backed routes answer 503 until restart
        logger.error("User store unavailable at startup", extra={"error": str(e)})

    yield  # App runs here

    if app.state.user_store is not None:
        app.state.user_store.close()
        app.state.user_store = None


app = FastAPI(
    title=SERVICE_NAME,
    description="User accounts: signup, login, bearer tokens and profiles",
    version=VERSION,
    lifespan=lifespan,
)

# CORS: browsers refuse credentials with a wildcard origin
if settings.cors_origins == "*":
    cors_origins = ["*"]
    allow_credentials = False
    if settings.is_production:
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "Set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
        )
else:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routes
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        access_log=False  # application logs already cover requests
    )
