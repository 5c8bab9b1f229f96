"""ORM model for roles (named permission groups assigned to users)."""

import enum

from sqlalchemy import Column, Enum, Integer, String

from app.models.base import Base


class RoleName(str, enum.Enum):
    """Fixed set of role names; stored by name."""

    ADMIN = "ADMIN"
    USER = "USER"
    MODERATOR = "MODERATOR"

    @property
    def authority(self) -> str:
        """Access-control tag for this role, e.g. ROLE_ADMIN."""
        return f"ROLE_{self.value}"


class Role(Base):
    """
    Role row created by the bootstrap seeder and never changed afterwards.

    Users reference roles through the user_roles link table; a role is shared, not owned.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(
        Enum(RoleName, name="role_name", native_enum=False, length=32),
        nullable=False,
        unique=True,
    )
    description = Column(String(255), nullable=True)
