"""MongoDB implementation of UserRepository."""

import uuid
from datetime import date, datetime, time, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateUserError, StorageError
from domain.model.user import DEFAULT_COIN_BALANCE, User

logger = getLogger(__name__)


def _dob_to_bson(dob: date) -> datetime:
    # BSON has no date type; store midnight UTC
    return datetime.combine(dob, time.min, tzinfo=timezone.utc)


def _dob_from_bson(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class MongoUserRepository:
    def __init__(self, db: Database, unique_email: bool = True):
        self.collection = db[USERS_COLLECTION_NAME]
        self.unique_email = unique_email

    def ensure_indexes(self) -> None:
        """Create indexes for users collection.

        Raises:
            StorageError: a unique index could not be built, e.g. existing duplicates
        """
        from adapter.mongodb.indexes import create_index_safe

        indexes = (
            ([('username', 1)], 'idx_users_username', True),
            ([('email', 1)], 'idx_users_email', self.unique_email),
        )
        for keys, name, unique in indexes:
            try:
                created = create_index_safe(self.collection, keys, name, unique=unique)
            except PyMongoError as e:
                if unique:
                    logger.error("Failed to create unique users index", extra={"index": name, "error": str(e)})
                    raise StorageError(f"Failed to create unique index {name}") from e
                logger.warning("Failed to create users index", extra={"index": name, "error": str(e)})
                continue
            if not created and unique:
                logger.error("Unique users index not in place", extra={"index": name})
                raise StorageError(f"Failed to create unique index {name}")

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            username=doc['username'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            dob=_dob_from_bson(doc['dob']),
            super_coin_bal=doc.get('super_coin_bal', DEFAULT_COIN_BALANCE),
            created_at=doc.get('created_at'),
            updated_at=doc.get('updated_at'),
        )

    def create(self, username: str, email: str, password_hash: str, dob: date) -> User:
        """Insert a new user document; the unique indexes reject duplicates."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'username': username,
            'email': email,
            'password_hash': password_hash,
            'dob': _dob_to_bson(dob),
            'super_coin_bal': DEFAULT_COIN_BALANCE,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: duplicate key", extra={"username": username})
            raise DuplicateUserError(username) from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"username": username, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "username": username})
        return self._to_domain(user_doc)

    def get_by_username(self, username: str) -> User | None:
        """Find a user by username. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'username': username})
        except PyMongoError as e:
            logger.error("Failed to get user by username", extra={"username": username, "error": str(e)})
            raise StorageError("Failed to read user") from e
        return self._to_domain(doc) if doc else None

    def update_profile(
        self,
        current_username: str,
        new_username: str,
        email: str | None = None,
        dob: date | None = None,
    ) -> User | None:
        """Rename and overwrite profile fields in one find_one_and_update."""
        changes = {'username': new_username, 'updated_at': datetime.now(timezone.utc)}
        if email is not None:
            changes['email'] = email
        if dob is not None:
            changes['dob'] = _dob_to_bson(dob)

        try:
            doc = self.collection.find_one_and_update(
                {'username': current_username},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            logger.warning(
                "Profile update failed: duplicate key",
                extra={"username": current_username, "newUsername": new_username},
            )
            raise DuplicateUserError(new_username) from e
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"username": current_username, "error": str(e)})
            raise StorageError("Failed to update user") from e

        if doc is None:
            return None
        logger.info("User profile updated", extra={"userId": doc['_id'], "username": new_username})
        return self._to_domain(doc)

    def ping(self) -> bool:
        from adapter.mongodb.connection import ping

        return ping(self.collection.database.client)
