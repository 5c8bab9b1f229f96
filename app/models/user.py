"""ORM model for application users (registration, authentication and RBAC)."""

from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table, func, true
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.models.role import Role, RoleName

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account. password_hash only ever holds a bcrypt digest.

    roles is the user's own set of role links; the Role rows themselves are shared.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    enabled = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    roles = relationship(Role, secondary=user_roles, lazy="selectin", collection_class=set)

    @property
    def role_names(self) -> frozenset[RoleName]:
        """Assigned roles as identifiers rather than entity references."""
        return frozenset(role.name for role in self.roles)
