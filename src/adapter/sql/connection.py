"""Engine and session setup for the relational backend."""

import logging

from sqlalchemy import Column, Index, MetaData, String, Table, create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adapter.sql import USERS_TABLE_NAME
from adapter.sql.models import Base
from domain.model.errors import StorageError

logger = logging.getLogger(__name__)

UNIQUE_EMAIL_INDEX = 'uq_users_email'


def create_sql_engine(database_url: str) -> Engine:
    """Create an engine with a connection pool sized for the API process."""
    url = make_url(database_url)
    if url.get_backend_name() == 'sqlite':
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, '', ':memory:'):
            # one shared connection, or every thread would see its own empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, pool_pre_ping=True, **kwargs)

    return create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)


def create_session_factory(engine: Engine) -> sessionmaker:
    # Records stay readable after commit so repositories can map them to domain objects
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def _unique_email_index() -> Index:
    # Built on a detached Table so create_all never creates it
    table = Table(USERS_TABLE_NAME, MetaData(), Column('email', String(255)))
    return Index(UNIQUE_EMAIL_INDEX, table.c.email, unique=True)


def ensure_schema(engine: Engine, unique_email: bool = True) -> None:
    """Create the users table if it does not exist yet.

    The unique email index follows ``unique_email``: created when wanted,
    dropped when left over from a run that wanted it.

    Raises:
        StorageError: DDL failed
    """
    try:
        Base.metadata.create_all(bind=engine)
        existing = {idx['name'] for idx in inspect(engine).get_indexes(USERS_TABLE_NAME)}
        has_index = UNIQUE_EMAIL_INDEX in existing
        if unique_email and not has_index:
            with engine.begin() as conn:
                _unique_email_index().create(bind=conn)
            logger.info("Created unique email index")
        elif not unique_email and has_index:
            with engine.begin() as conn:
                _unique_email_index().drop(bind=conn)
            logger.info("Dropped unique email index")
    except SQLAlchemyError as e:
        logger.error("Failed to create users schema", extra={"error": str(e)})
        raise StorageError("Failed to create users schema") from e


def ping(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("Database ping failed", extra={"error": str(e)[:200]})
        return False
