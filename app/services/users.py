"""User directory: registration, lookup, update, deletion and password checks."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import RoleName, User
from app.repositories import RoleRepository, UserRepository
from app.schemas.user import RegistrationRequest, UserUpdateRequest
from app.services.errors import DuplicateIdentityError, IdentityField, UserNotFoundError

logger = logging.getLogger(__name__)


class UserDirectory:
    """
    Single source of truth for accounts. Holds no state besides its session,
    so one instance per request is the expected lifetime.
    """

    def __init__(self, session: Session) -> None:
        self.users = UserRepository(session)
        self.roles = RoleRepository(session)

    def register(self, candidate: RegistrationRequest) -> User:
        """
        Create an account with the default USER role.

        Username is checked before email. Raises DuplicateIdentityError without writing
        anything when either is taken, including when the database unique constraint
        catches a concurrent registration that passed the checks.
        """
        self._ensure_unique(candidate.username, str(candidate.email))
        default_roles = [RoleName.USER]
        if self.roles.find_by_name(RoleName.USER) is None:
            logger.warning(
                "Role %s missing; registering %r without roles", RoleName.USER.value, candidate.username
            )
            default_roles = []
        user = self.create_user(
            username=candidate.username,
            email=str(candidate.email),
            password=candidate.password,
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            roles=default_roles,
        )
        logger.info("Registered user id=%s username=%r", user.id, user.username)
        return user

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        roles: Iterable[RoleName] = (),
        enabled: bool = True,
    ) -> User:
        """Persist a new account with the given roles; roles missing from the store are skipped."""
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            enabled=enabled,
            created_at=datetime.now(UTC),
        )
        user.roles = {role for role in map(self.roles.find_by_name, roles) if role is not None}
        try:
            return self.users.save(user)
        except IntegrityError as e:
            raise DuplicateIdentityError(self._collided_field(username, email)) from e

    def find_by_username(self, username: str) -> User | None:
        return self.users.find_by_username(username)

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.find_by_id(user_id)

    def list_all(self) -> list[User]:
        return self.users.find_all()

    def list_by_role(self, role: RoleName) -> list[User]:
        return self.users.find_by_role_name(role)

    def validate_password(self, raw_password: str, stored_hash: str) -> bool:
        return verify_password(raw_password, stored_hash)

    def update(self, user_id: int, patch: UserUpdateRequest) -> User:
        """
        Apply first name, last name and email from the patch (only fields that were sent).
        Username, password hash, roles, enabled and created_at are never touched.
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        changes = patch.model_dump(include={"first_name", "last_name", "email"}, exclude_unset=True)
        if "email" in changes:
            changes["email"] = str(changes["email"])
            if self.users.exists_by_email(changes["email"], exclude_id=user_id):
                raise DuplicateIdentityError("email")
        for attr, value in changes.items():
            setattr(user, attr, value)
        try:
            user = self.users.save(user)
        except IntegrityError as e:
            raise DuplicateIdentityError("email") from e
        logger.info("Updated user id=%s fields=%s", user_id, sorted(changes))
        return user

    def delete(self, user_id: int) -> None:
        """Remove the account if it exists; deleting an unknown id is not an error."""
        if self.users.delete_by_id(user_id):
            logger.info("Deleted user id=%s", user_id)

    def _ensure_unique(self, username: str, email: str) -> None:
        if self.users.exists_by_username(username):
            logger.warning("Registration rejected: username %r already exists", username)
            raise DuplicateIdentityError("username")
        if self.users.exists_by_email(email):
            logger.warning("Registration rejected: email already exists for %r", username)
            raise DuplicateIdentityError("email")

    def _collided_field(self, username: str, email: str) -> IdentityField:
        if self.users.exists_by_username(username):
            return "username"
        if self.users.exists_by_email(email):
            return "email"
        return "username"
