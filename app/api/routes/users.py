"""User administration and self-profile endpoints, guarded by the access policy."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_directory, require_access
from app.schemas.auth import Principal
from app.schemas.user import UserResponse, UserUpdateRequest
from app.services.errors import DuplicateIdentityError, UserNotFoundError
from app.services.users import UserDirectory

router = APIRouter()


@router.get("", response_model=list[UserResponse])
def list_users(
    _admin: Annotated[Principal, Depends(require_access("list_users"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> list[UserResponse]:
    """List all users (admin only). No pagination."""
    return [UserResponse.from_user(u) for u in directory.list_all()]


@router.get("/me", response_model=UserResponse)
def read_own_profile(
    principal: Annotated[Principal, Depends(require_access("read_own_profile"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserResponse:
    user = directory.find_by_username(principal.username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_user(user)


@router.get("/{user_id}", response_model=UserResponse)
def read_user(
    user_id: int,
    _admin: Annotated[Principal, Depends(require_access("read_user"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserResponse:
    user = directory.find_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_user(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    _admin: Annotated[Principal, Depends(require_access("update_user"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserResponse:
    """Overwrite first name, last name and email; nothing else about the account changes."""
    try:
        user = directory.update(user_id, body)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except DuplicateIdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[{"field": e.field, "reason": e.message}],
        ) from e
    return UserResponse.from_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _admin: Annotated[Principal, Depends(require_access("delete_user"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> Response:
    """Delete by id. Unknown ids still return 204."""
    directory.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
