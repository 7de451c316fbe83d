"""SQLAlchemy table mapping for the users table."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

from adapter.sql import USERS_TABLE_NAME
from domain.model.user import DEFAULT_COIN_BALANCE

Base: Any = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRecord(Base):
    """Row in the users table."""

    __tablename__ = USERS_TABLE_NAME

    id = Column(String(32), primary_key=True)
    username = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    dob = Column(Date, nullable=False)
    super_coin_bal = Column(Integer, nullable=False, default=DEFAULT_COIN_BALANCE)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
