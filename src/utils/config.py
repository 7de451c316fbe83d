"""Application settings loaded from environment variables (and .env)."""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

BACKENDS = ("sql", "mongodb")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    environment: str = "development"
    user_store_backend: str = "sql"
    database_url: str = "sqlite:///./accounts.db"
    mongo_url: str | None = None
    mongodb_database: str = "accounts"
    unique_email: bool = True
    jwt_algorithm: str = "HS256"
    bcrypt_rounds: int = 10
    cors_origins: str = "*"
    log_level: str = "INFO"
    port: int = 8000

    def __post_init__(self):
        if self.user_store_backend not in BACKENDS:
            raise ValueError(
                f"USER_STORE_BACKEND must be one of {', '.join(BACKENDS)}, got {self.user_store_backend!r}"
            )
        if not self.jwt_secret_key or not self.jwt_secret_key.strip():
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        if self.is_production and self.user_store_backend == "sql" and self.database_url.startswith("sqlite"):
            raise ValueError("DATABASE_URL should not use SQLite in production")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            user_store_backend=os.getenv("USER_STORE_BACKEND", "sql").strip().lower(),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./accounts.db"),
            mongo_url=os.getenv("MONGO_URL"),
            mongodb_database=os.getenv("MONGODB_DATABASE", "accounts"),
            unique_email=_env_bool("UNIQUE_EMAIL", True),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=int(os.getenv("PORT", "8000")),
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
