"""Failure kinds raised by the user directory service."""

from typing import Literal

IdentityField = Literal["username", "email"]


class UserDirectoryError(Exception):
    """Base class for directory failures the HTTP layer maps to 4xx responses."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateIdentityError(UserDirectoryError):
    """Raised when a username or email is already taken; field names the collision."""

    def __init__(self, field: IdentityField) -> None:
        self.field = field
        super().__init__(f"{field.capitalize()} already exists")


class UserNotFoundError(UserDirectoryError):
    """Raised when an operation targets a user id that does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("User not found")
