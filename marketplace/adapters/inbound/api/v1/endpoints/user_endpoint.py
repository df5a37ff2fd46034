# marketplace/adapters/inbound/api/v1/endpoints/user_endpoint.py (async version)

from uuid import UUID
from fastapi import APIRouter, Depends

from marketplace.adapters.inbound.api.deps import get_auth_service, get_current_user
from marketplace.application.dtos.user_dto import UserOutput
from marketplace.application.use_cases.auth_use_cases import AsyncAuthService
from marketplace.domain.exceptions import UserNotFoundException

router = APIRouter()

GATEKEEPER_NOTE = (
    " With the default GATEKEEPER_EXEMPT_PATHS, /users/ routes are not behind the "
    "API key gatekeeper: the Authorization header carries the session token here."
)


@router.get(
    "/me",
    response_model=UserOutput,
    summary="Current User - Returns the authenticated user",
    description="Requires a session token that has not been revoked by logout." + GATEKEEPER_NOTE,
    responses={
        401: {"description": "Missing, invalid, expired or revoked token"},
        403: {"description": "Account is not active"},
    }
)
async def read_current_user(current_user: UserOutput = Depends(get_current_user)):
    return current_user


@router.get(
    "/{user_id}",
    response_model=UserOutput,
    summary="Get User - Returns the public view of a user",
    description=(
            "Served from the user snapshot cache when present (up to one hour old), "
            "otherwise from the credential store. Requires a valid session token."
            + GATEKEEPER_NOTE
    ),
    responses={
        401: {"description": "Missing, invalid, expired or revoked token"},
        404: {"description": "User not found"},
    }
)
async def read_user(
        user_id: UUID,
        current_user: UserOutput = Depends(get_current_user),
        service: AsyncAuthService = Depends(get_auth_service),
):
    user = await service.get_user(user_id)
    if user is None:
        raise UserNotFoundException()
    return user
