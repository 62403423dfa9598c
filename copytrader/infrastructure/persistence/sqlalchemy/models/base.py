"""SQLAlchemy Base model."""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# SQLite autoincrement працює тільки з INTEGER PRIMARY KEY
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class для всіх ORM models (declarative mapping, SQLAlchemy 2.0+)."""

    pass
