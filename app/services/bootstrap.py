"""Bootstrap seeding: baseline roles and the default administrator account."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models import Role, RoleName, User
from app.repositories import RoleRepository, UserRepository

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS: dict[RoleName, str] = {
    RoleName.ADMIN: "Administrator role",
    RoleName.USER: "Regular user role",
    RoleName.MODERATOR: "Moderator role",
}


@dataclass
class SeedReport:
    """What a seeding run created (empty on every run after the first)."""

    roles_created: list[RoleName] = field(default_factory=list)
    admin_created: bool = False


def seed_defaults(session: Session, settings: "Settings") -> SeedReport:
    """
    Create any missing baseline roles, then the default admin if no user has its name.
    The admin is skipped, with a warning, when another account already holds its email.

    Everything is committed once at the end; on failure the session is rolled back
    and the error propagates. Idempotent: safe to run on every start.
    """
    roles = RoleRepository(session)
    users = UserRepository(session)
    report = SeedReport()
    try:
        for name, description in ROLE_DESCRIPTIONS.items():
            if roles.find_by_name(name) is None:
                roles.add(Role(name=name, description=description))
                report.roles_created.append(name)
                logger.info("Seeded role %s", name.value)

        admin_username = settings.DEFAULT_ADMIN_USERNAME
        admin_email = settings.DEFAULT_ADMIN_EMAIL
        if users.exists_by_username(admin_username):
            logger.debug("Default admin %r already present", admin_username)
        elif users.exists_by_email(admin_email):
            logger.warning(
                "Default admin %r not seeded: email %r belongs to another account",
                admin_username,
                admin_email,
            )
        else:
            admin = User(
                username=admin_username,
                email=admin_email,
                password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD.get_secret_value()),
                first_name="Admin",
                last_name="User",
                enabled=True,
            )
            admin_role = roles.find_by_name(RoleName.ADMIN)
            admin.roles = {admin_role} if admin_role is not None else set()
            session.add(admin)
            report.admin_created = True
            logger.info("Seeded default admin %r", admin_username)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return report
