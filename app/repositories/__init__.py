"""Persistence access for users and roles. Services never build queries themselves."""

from app.repositories.roles import RoleRepository
from app.repositories.users import UserRepository

__all__ = ["RoleRepository", "UserRepository"]
