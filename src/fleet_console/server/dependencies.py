"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_console.config import Settings
from fleet_console.resources.records import SessionUser

# Fixed identities behind the development session tokens
DEV_ADMIN = {"id": 1, "email": "admin@fleet.local", "isAdmin": True, "isClient": False, "isEmployee": False}
DEV_CLIENT = {"id": 1, "email": "client@fleet.local", "isAdmin": False, "isClient": True, "isEmployee": False}


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with request.app.state.db.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SessionUser | None:
    """Resolve the session cookie to a user (None when absent or unknown)."""
    token = request.cookies.get(settings.session_cookie)
    if not token:
        return None
    if token == settings.dev_admin_token:
        return SessionUser.model_validate(DEV_ADMIN)
    if token == settings.dev_client_token:
        return SessionUser.model_validate(DEV_CLIENT)
    return None


def require_user(
    user: Annotated[SessionUser | None, Depends(get_session_user)],
) -> SessionUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_admin(user: Annotated[SessionUser, Depends(require_user)]) -> SessionUser:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def require_client(user: Annotated[SessionUser, Depends(require_user)]) -> SessionUser:
    if not (user.is_client or user.is_admin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Client access required",
        )
    return user


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
OptionalUser = Annotated[SessionUser | None, Depends(get_session_user)]
CurrentUser = Annotated[SessionUser, Depends(require_user)]
AdminUser = Annotated[SessionUser, Depends(require_admin)]
ClientUser = Annotated[SessionUser, Depends(require_client)]
