"""Public account endpoints."""

from fastapi import APIRouter, status

from src.portal.api.dependencies import AccountServiceDep
from src.portal.core.exceptions import unwrap
from src.portal.schemas.user import SignUpRequest, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/sign-up",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"description": "Invalid data or email already registered"}},
)
async def sign_up(data: SignUpRequest, account_service: AccountServiceDep) -> UserRead:
    """Create an account awaiting admin approval."""
    return unwrap(await account_service.sign_up(data))
