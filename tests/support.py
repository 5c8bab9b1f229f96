"""Shared helpers: an isolated in-memory SQLite store per test case."""

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Role, RoleName, User
from app.schemas.user import RegistrationRequest


def make_store() -> tuple[Engine, sessionmaker[Session]]:
    """
    One shared connection (StaticPool) so every session, including those opened
    from TestClient worker threads, sees the same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False)


def add_roles(session: Session, *names: RoleName) -> None:
    for name in names or tuple(RoleName):
        session.add(Role(name=name, description=f"{name.value.title()} role"))
    session.commit()


def user_count(session: Session) -> int:
    return session.scalar(select(func.count()).select_from(User))


def registration(
    username: str = "alice",
    email: str = "alice@x.com",
    password: str = "pw123456",
    **kwargs: object,
) -> RegistrationRequest:
    return RegistrationRequest(username=username, email=email, password=password, **kwargs)
