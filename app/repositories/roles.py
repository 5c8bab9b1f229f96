"""Role repository over a SQLAlchemy session."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Role, RoleName


class RoleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_name(self, name: RoleName) -> Role | None:
        return self.session.scalars(select(Role).where(Role.name == name)).first()

    def find_all(self) -> list[Role]:
        return list(self.session.scalars(select(Role).order_by(Role.id)))

    def add(self, role: Role) -> Role:
        """Stage a role in the current unit of work; the caller commits."""
        self.session.add(role)
        self.session.flush()
        return role
