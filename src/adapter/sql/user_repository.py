"""SQLAlchemy implementation of UserRepository."""

import uuid
from datetime import date, datetime, timezone
from logging import getLogger

from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from adapter.sql.connection import create_session_factory, ensure_schema, ping
from adapter.sql.models import UserRecord
from domain.model.errors import DuplicateUserError, StorageError
from domain.model.user import DEFAULT_COIN_BALANCE, User

logger = getLogger(__name__)


class SqlUserRepository:
    def __init__(self, engine: Engine, unique_email: bool = True):
        self.engine = engine
        self.unique_email = unique_email
        self._session_factory = create_session_factory(engine)

    def ensure_schema(self) -> None:
        ensure_schema(self.engine, unique_email=self.unique_email)

    @staticmethod
    def _to_domain(record: UserRecord) -> User:
        return User(
            id=record.id,
            username=record.username,
            email=record.email,
            password_hash=record.password_hash,
            dob=record.dob,
            super_coin_bal=record.super_coin_bal,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def create(self, username: str, email: str, password_hash: str, dob: date) -> User:
        """Insert a new row; the unique constraints reject duplicates."""
        now = datetime.now(timezone.utc)
        record = UserRecord(
            id=uuid.uuid4().hex,
            username=username,
            email=email,
            password_hash=password_hash,
            dob=dob,
            super_coin_bal=DEFAULT_COIN_BALANCE,
            created_at=now,
            updated_at=now,
        )
        with self._session_factory() as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.warning("User creation failed: duplicate key", extra={"username": username})
                raise DuplicateUserError(username) from e
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Failed to create user", extra={"username": username, "error": str(e)})
                raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": record.id, "username": username})
        return self._to_domain(record)

    def get_by_username(self, username: str) -> User | None:
        try:
            with self._session_factory() as session:
                record = session.scalar(select(UserRecord).where(UserRecord.username == username))
        except SQLAlchemyError as e:
            logger.error("Failed to get user by username", extra={"username": username, "error": str(e)})
            raise StorageError("Failed to read user") from e
        return self._to_domain(record) if record else None

    def update_profile(
        self,
        current_username: str,
        new_username: str,
        email: str | None = None,
        dob: date | None = None,
    ) -> User | None:
        """Rename and overwrite profile fields with one UPDATE ... WHERE username = ?.

        The updated row comes back through RETURNING where the dialect has it,
        otherwise from a read inside the same transaction.
        """
        changes = {'username': new_username, 'updated_at': datetime.now(timezone.utc)}
        if email is not None:
            changes['email'] = email
        if dob is not None:
            changes['dob'] = dob

        stmt = (
            update(UserRecord)
            .where(UserRecord.username == current_username)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        returning = self.engine.dialect.update_returning
        if returning:
            stmt = stmt.returning(UserRecord)

        with self._session_factory() as session:
            try:
                result = session.execute(stmt)
                if returning:
                    record = result.scalar_one_or_none()
                elif result.rowcount:
                    # Read back before commit; the updated row is still ours
                    record = session.scalar(select(UserRecord).where(UserRecord.username == new_username))
                else:
                    record = None
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.warning(
                    "Profile update failed: duplicate key",
                    extra={"username": current_username, "newUsername": new_username},
                )
                raise DuplicateUserError(new_username) from e
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Failed to update user", extra={"username": current_username, "error": str(e)})
                raise StorageError("Failed to update user") from e

        if record is None:
            return None
        logger.info("User profile updated", extra={"userId": record.id, "username": new_username})
        return self._to_domain(record)

    def ping(self) -> bool:
        return ping(self.engine)
