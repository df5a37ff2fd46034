# marketplace/adapters/inbound/api/v1/endpoints/auth_endpoint.py (async version)

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Response, status

from marketplace.application.use_cases.auth_use_cases import AsyncAuthService
from marketplace.adapters.inbound.api.deps import get_auth_service
from marketplace.application.dtos.user_dto import UserCreate, UserLogin, UserOutput, LoginOutput

logger = logging.getLogger(__name__)
router = APIRouter()

GATEKEEPER_NOTE = (
    " With the default GATEKEEPER_EXEMPT_PATHS, /auth/ routes are not behind the "
    "API key gatekeeper."
)


@router.post(
    "/register",
    response_model=UserOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Register User - Creates a new user",
    description="""
    Creates a new active user with the standard role and a zero credit balance.

    - Username: 3 to 50 characters (letters, numbers, '.', '_', '-')
    - Email: valid format, unique
    - Password: at least 8 characters

    Not behind the API key gatekeeper with the default GATEKEEPER_EXEMPT_PATHS.
    """,
    responses={
        400: {"description": "Malformed request"},
        409: {
            "description": "Email already registered or username already taken",
            "content": {
                "application/json": {
                    "example": {"detail": "Email already registered", "code": "DUPLICATE_EMAIL"}
                }
            }
        },
    }
)
async def register_user(
        user_input: UserCreate,
        service: AsyncAuthService = Depends(get_auth_service),
):
    return await service.register_user(user_input)


@router.post(
    "/login",
    response_model=LoginOutput,
    summary="Login User - Generates a session token",
    description=(
            "Authenticates a user (email/password) and returns a signed session token "
            "valid for 24 hours, together with the user record. "
            "Suspended or banned accounts are rejected with 403."
            + GATEKEEPER_NOTE
    ),
    responses={
        401: {
            "description": "Invalid credentials",
            "content": {
                "application/json": {
                    "example": {"detail": "Invalid credentials", "code": "INVALID_CREDENTIALS"}
                }
            }
        },
        403: {"description": "Account is not active"},
    }
)
async def login_user(
        credentials: UserLogin,
        service: AsyncAuthService = Depends(get_auth_service),
):
    return await service.login_user(credentials)


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    summary="Logout - Revoke the session token",
    description=(
            "Blacklists the token of the Authorization header (with or without the "
            "'Bearer ' prefix). Without a token this is a no-op."
            + GATEKEEPER_NOTE
    ),
)
async def logout_user(
        authorization: Optional[str] = Header(None),
        service: AsyncAuthService = Depends(get_auth_service),
):
    await service.logout_user(authorization)
    return Response(status_code=status.HTTP_200_OK)
