import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

from domain.model.errors import StorageError

logger = logging.getLogger(__name__)

# Keep driver-level chatter out of the structured logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)


def create_mongodb_client(mongo_url: str | None) -> MongoClient:
    """Open a MongoDB client and verify it with a ping.

    The client owns a connection pool and is meant to live for the whole
    process: open it once at startup and close it at shutdown.

    Raises:
        StorageError: URL missing or server unreachable
    """
    if not mongo_url:
        logger.error("[MONGODB] MONGO_URL not configured.")
        raise StorageError("MONGO_URL is not configured")

    try:
        client = MongoClient(
            mongo_url,
            serverSelectionTimeoutMS=5000,  # server selection
            connectTimeoutMS=5000,  # initial connection
            socketTimeoutMS=30000,  # per operation
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            waitQueueTimeoutMS=10000,
            retryWrites=True,
            retryReads=True,
        )
        client.admin.command('ping')
    except (ConnectionFailure, PyMongoError) as e:
        logger.error(f"[MONGODB] Initial connection failed: {str(e)[:200]}")
        raise StorageError("MongoDB connection failed") from e

    logger.info("[MONGODB] Connected successfully")
    return client


def ping(client: MongoClient) -> bool:
    """Return True if the server answers a ping."""
    try:
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("[MONGODB] Ping failed", extra={"error": str(e)[:200]})
        return False
