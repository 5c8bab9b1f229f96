"""SQLAlchemy declarative Base shared by the user and role models."""

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    def __repr__(self) -> str:
        # Primary key only; never render column values such as password hashes.
        identity = inspect(self).identity
        key = identity[0] if identity else None
        return f"{type(self).__name__}(id={key!r})"
