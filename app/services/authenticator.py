"""Username/password authentication against the user directory."""

import enum
import logging
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from app.schemas.auth import Principal
from app.services.users import UserDirectory

logger = logging.getLogger(__name__)


class AuthenticationFailure(str, enum.Enum):
    """Why an authentication attempt was refused."""

    USER_NOT_FOUND = "User not found"
    # Wrong password and disabled account share this reason.
    CREDENTIALS_DO_NOT_MATCH = "Credentials do not match"


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of one attempt: a principal on success, a failure reason otherwise."""

    principal: Principal | None = None
    failure: AuthenticationFailure | None = None

    @property
    def authenticated(self) -> bool:
        return self.principal is not None

    @classmethod
    def success(cls, principal: Principal) -> "AuthenticationResult":
        return cls(principal=principal)

    @classmethod
    def rejected(cls, failure: AuthenticationFailure) -> "AuthenticationResult":
        return cls(failure=failure)


class Authenticator:
    """
    Decide whether a username/password pair identifies an enabled account.

    Only reads from the directory, so a single instance can serve concurrent
    requests for different principals.
    """

    def __init__(self, directory: UserDirectory) -> None:
        self.directory = directory

    def authenticate(self, username: str, password: str) -> AuthenticationResult:
        user = self.directory.find_by_username(username)
        if user is None:
            logger.warning("Authentication failed for %r: user not found", username)
            return AuthenticationResult.rejected(AuthenticationFailure.USER_NOT_FOUND)
        if not user.enabled or not self.directory.validate_password(password, user.password_hash):
            logger.warning("Authentication failed for %r: credentials do not match", username)
            return AuthenticationResult.rejected(AuthenticationFailure.CREDENTIALS_DO_NOT_MATCH)
        roles = frozenset(role.authority for role in user.role_names)
        return AuthenticationResult.success(Principal(username=user.username, roles=roles))

    async def authenticate_async(self, username: str, password: str) -> AuthenticationResult:
        """Same check as authenticate(), run on a worker thread (bcrypt is blocking)."""
        return await run_in_threadpool(self.authenticate, username, password)
