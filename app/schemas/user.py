"""Request/response schemas for user registration and administration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.config import PASSWORD_MAX_BYTES, get_settings
from app.models import RoleName, User


class _CamelModel(BaseModel):
    """JSON uses camelCase; snake_case field names are accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegistrationRequest(_CamelModel):
    """Body of POST /auth/register."""

    username: str = Field(..., max_length=255, description="Unique login name")
    email: EmailStr = Field(..., description="Unique e-mail address")
    password: str = Field(..., description="Plain-text password; stored only as a bcrypt hash")
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        min_length = get_settings().PASSWORD_MIN_LENGTH
        if len(v) < min_length:
            raise ValueError(f"must be at least {min_length} characters")
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"must be at most {PASSWORD_MAX_BYTES} bytes")
        return v


class UserUpdateRequest(_CamelModel):
    """
    Body of PUT /api/users/{id}. Only the fields present in the body are applied;
    an explicit null clears a name.
    """

    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def reject_null_email(cls, v: object) -> object:
        if v is None:
            raise ValueError("must not be null")
        return v


class UserResponse(_CamelModel):
    """User as returned by the API. There is no password field."""

    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    enabled: bool
    created_at: datetime | None = None
    roles: list[RoleName] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            enabled=user.enabled,
            created_at=user.created_at,
            roles=sorted(user.role_names, key=lambda r: r.value),
        )
