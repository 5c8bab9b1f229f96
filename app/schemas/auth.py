"""Request/response schemas for auth endpoints and the authenticated principal."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials shape documented by POST /auth/login (the endpoint does not consume them)."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after a successful Basic login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    username: str = Field(..., description="Authenticated username")
    roles: list[str] = Field(default_factory=list, description="Access-control tags, e.g. ROLE_USER")


class Principal(BaseModel):
    """Authenticated identity: username plus access-control tags (ROLE_<NAME>)."""

    model_config = ConfigDict(frozen=True)

    username: str
    roles: frozenset[str] = frozenset()

    def has_any_role(self, *authorities: str) -> bool:
        return any(a in self.roles for a in authorities)


class ValidationFailure(BaseModel):
    """One rejected request field."""

    field: str
    reason: str


class ValidationErrorResponse(BaseModel):
    detail: list[ValidationFailure]
