"""Session endpoint."""

from fastapi import APIRouter

from fleet_console.server.dependencies import CurrentUser
from fleet_console.server.schemas import MeResponse, SessionUserResponse

router = APIRouter(tags=["auth"])


@router.get("/api/auth/me", response_model=MeResponse)
async def me(user: CurrentUser) -> MeResponse:
    """The signed-in user; 401 without a valid session cookie."""
    return MeResponse(
        user=SessionUserResponse(
            id=user.id or 0,
            email=user.email or "",
            is_admin=user.is_admin,
            is_client=user.is_client,
            is_employee=user.is_employee,
        )
    )
