"""Anonymous auth endpoints: registration, login instructions and Basic-to-JWT login."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.api.deps import BASIC_CHALLENGE, get_authenticator, get_directory
from app.core.security import create_access_token
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import RegistrationRequest, UserResponse
from app.services.authenticator import Authenticator
from app.services.errors import DuplicateIdentityError
from app.services.users import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter()
login_router = APIRouter()
login_scheme = HTTPBasic(realm="userdir")

LOGIN_INSTRUCTIONS = "Use POST /login with Basic Authentication"


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegistrationRequest,
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserResponse:
    """Create an account with the USER role. The response never carries the password."""
    try:
        user = directory.register(body)
    except DuplicateIdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[{"field": e.field, "reason": e.message}],
        ) from e
    return UserResponse.from_user(user)


@router.post("/login", response_class=PlainTextResponse)
def login_instructions(
    _body: Annotated[LoginRequest | None, Body()] = None,
) -> str:
    """Documentation only: tokens are issued by POST /login with Basic credentials."""
    return LOGIN_INSTRUCTIONS


@login_router.post("/login", response_model=TokenResponse)
async def login(
    credentials: Annotated[HTTPBasicCredentials, Depends(login_scheme)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
) -> TokenResponse:
    """
    Authenticate with HTTP Basic credentials; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    result = await authenticator.authenticate_async(credentials.username, credentials.password)
    if not result.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.failure.value,
            headers={"WWW-Authenticate": BASIC_CHALLENGE},
        )
    principal = result.principal
    token = create_access_token(sub=principal.username)
    logger.info("Issued access token for %r", principal.username)
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        username=principal.username,
        roles=sorted(principal.roles),
    )
