"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.role import Role, RoleName
from app.models.user import User, user_roles

__all__ = ["Base", "Role", "RoleName", "User", "user_roles"]
