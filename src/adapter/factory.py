"""Open and close the configured user store.

The store is opened once per process (application startup) and closed at
shutdown. Everything else receives the repository by injection.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from domain.model.errors import StorageError
from port.user_repository import UserRepository
from utils.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class UserStore:
    """An open user repository plus the handle needed to release it."""
    backend: str
    repo: UserRepository
    _close: Callable[[], None]

    def ping(self) -> bool:
        return self.repo.ping()

    def close(self) -> None:
        self._close()
        logger.info("User store closed", extra={"backend": self.backend})


def _open_sql(settings: Settings) -> UserStore:
    from adapter.sql.connection import create_sql_engine
    from adapter.sql.user_repository import SqlUserRepository

    engine = create_sql_engine(settings.database_url)
    repo = SqlUserRepository(engine, unique_email=settings.unique_email)
    try:
        repo.ensure_schema()
    except StorageError:
        engine.dispose()
        raise
    return UserStore(backend="sql", repo=repo, _close=engine.dispose)


def _open_mongodb(settings: Settings) -> UserStore:
    from adapter.mongodb.connection import create_mongodb_client
    from adapter.mongodb.user_repository import MongoUserRepository

    client = create_mongodb_client(settings.mongo_url)
    repo = MongoUserRepository(client[settings.mongodb_database], unique_email=settings.unique_email)
    try:
        repo.ensure_indexes()
    except StorageError:
        client.close()
        raise
    return UserStore(backend="mongodb", repo=repo, _close=client.close)


def open_user_store(settings: Settings) -> UserStore:
    """Open the backend named by USER_STORE_BACKEND and prepare its schema.

    Raises:
        StorageError: backend unreachable or schema setup failed
    """
    if settings.user_store_backend == "mongodb":
        store = _open_mongodb(settings)
    else:
        store = _open_sql(settings)
    logger.info("User store opened", extra={"backend": store.backend})
    return store
