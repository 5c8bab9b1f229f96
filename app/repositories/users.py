"""User repository over a SQLAlchemy session."""

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Role, RoleName, User


class UserRepository:
    """Lookups, existence checks and writes for User rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.scalars(select(User).where(User.username == username)).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_all(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.id)))

    def find_by_role_name(self, name: RoleName) -> list[User]:
        stmt = select(User).where(User.roles.any(Role.name == name)).order_by(User.id)
        return list(self.session.scalars(stmt))

    def exists_by_username(self, username: str) -> bool:
        return bool(self.session.scalar(select(exists().where(User.username == username))))

    def exists_by_email(self, email: str, exclude_id: int | None = None) -> bool:
        clause = User.email == email
        if exclude_id is not None:
            clause = clause & (User.id != exclude_id)
        return bool(self.session.scalar(select(exists().where(clause))))

    def save(self, user: User) -> User:
        """
        Add (if new), commit and refresh.
        Rolls back and re-raises IntegrityError when a storage constraint rejects the row.
        """
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def delete_by_id(self, user_id: int) -> bool:
        """Delete the user if present; returns whether a row was removed."""
        user = self.session.get(User, user_id)
        if user is None:
            return False
        self.session.delete(user)
        self.session.commit()
        return True
