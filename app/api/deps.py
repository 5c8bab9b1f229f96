"""Request dependencies: directory wiring, principal resolution and the access policy."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import decode_access_token
from app.models import RoleName
from app.schemas.auth import Principal
from app.services.authenticator import Authenticator
from app.services.users import UserDirectory

bearer_scheme = HTTPBearer(auto_error=False)
basic_scheme = HTTPBasic(auto_error=False)

# Resource -> roles allowed to reach it. Register and login are anonymous and not listed.
ACCESS_POLICY: dict[str, frozenset[RoleName]] = {
    "list_users": frozenset({RoleName.ADMIN}),
    "read_own_profile": frozenset({RoleName.USER, RoleName.ADMIN}),
    "read_user": frozenset({RoleName.ADMIN}),
    "update_user": frozenset({RoleName.ADMIN}),
    "delete_user": frozenset({RoleName.ADMIN}),
}


BASIC_CHALLENGE = 'Basic realm="userdir"'


def _unauthorized(detail: str, challenge: str = "Bearer") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": challenge},
    )


def get_directory(db: Annotated[Session, Depends(get_db)]) -> UserDirectory:
    return UserDirectory(db)


def get_authenticator(
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> Authenticator:
    return Authenticator(directory)


def get_optional_principal(
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    basic: Annotated[HTTPBasicCredentials | None, Depends(basic_scheme)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
) -> Principal | None:
    """
    Resolve the caller from a Bearer JWT (issued by POST /login) or Basic credentials.
    Returns None when no credentials were presented; raises 401 when they are invalid.
    """
    if bearer is not None:
        try:
            payload = decode_access_token(bearer.credentials)
        except jwt.PyJWTError:
            raise _unauthorized("Invalid or expired token")
        username = payload.get("sub")
        if not username or not isinstance(username, str):
            raise _unauthorized("Invalid token payload")
        # Roles and enabled state come from the store, not from the token.
        user = authenticator.directory.find_by_username(username)
        if user is None or not user.enabled:
            raise _unauthorized("User not found or disabled")
        return Principal(
            username=user.username,
            roles=frozenset(role.authority for role in user.role_names),
        )
    if basic is not None:
        result = authenticator.authenticate(basic.username, basic.password)
        if not result.authenticated:
            raise _unauthorized(result.failure.value, BASIC_CHALLENGE)
        return result.principal
    return None


def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """Dependency: require an authenticated principal. Raises 401 otherwise."""
    if principal is None:
        raise _unauthorized("Not authenticated")
    return principal


def require_access(resource: str) -> Callable[[Principal], Principal]:
    """Build a dependency enforcing ACCESS_POLICY[resource]; 403 when the principal lacks every allowed role."""
    allowed = tuple(role.authority for role in ACCESS_POLICY[resource])

    def dependency(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not principal.has_any_role(*allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return principal

    return dependency
