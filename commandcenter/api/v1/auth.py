"""Authentication: bearer identity and caller resolution."""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.config import get_settings
from commandcenter.db.session import get_db_session
from commandcenter.models.user import User
from commandcenter.models.workspace import WorkspaceUser
from commandcenter.services.exceptions import UnauthenticatedError
from commandcenter.services.membership import Caller, create_workspace

router = APIRouter()
logger = structlog.get_logger()
settings = get_settings()
security = HTTPBearer(auto_error=False)

DEV_TOKEN = "dev-token-for-testing"
DEV_USER_EMAIL = "dev@commandcenter.local"


class UserResponse(BaseModel):
    """User profile as seen by other workspace members."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str
    image: str | None


def create_access_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.jwt_access_token_expire_minutes
        )

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


async def get_or_create_dev_user(db: AsyncSession) -> User:
    """Development-only user with a workspace of its own."""
    result = await db.execute(select(User).where(User.email == DEV_USER_EMAIL))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(email=DEV_USER_EMAIL, name="Dev User")
        db.add(user)
        await db.flush()
        logger.info("Created dev user", user_id=str(user.id))

    member_result = await db.execute(
        select(WorkspaceUser.id).where(WorkspaceUser.user_id == user.id).limit(1)
    )
    if member_result.scalar_one_or_none() is None:
        await create_workspace(db, user, "Dev Workspace", slug=f"dev-{str(user.id)[:8]}")
    else:
        await db.commit()

    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Get the current authenticated user from JWT token."""
    if not credentials:
        raise UnauthenticatedError()

    # Dev token bypass for local development
    if credentials.credentials == DEV_TOKEN and settings.environment == "development":
        return await get_or_create_dev_user(db)

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise UnauthenticatedError("Invalid token")

    user_id = payload.get("sub")
    token_type = payload.get("type")
    if user_id is None or token_type != "access":
        raise UnauthenticatedError("Invalid token")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise UnauthenticatedError("Invalid token")

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthenticatedError("User not found")

    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_caller(
    current_user: CurrentUser,
    workspace_id: Annotated[UUID | None, Header(alias=settings.workspace_header)] = None,
) -> Caller:
    """Identity passed explicitly into every service call."""
    return Caller(user_id=current_user.id, workspace_id=workspace_id)


CurrentCaller = Annotated[Caller, Depends(get_caller)]


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> User:
    """Get current user information."""
    return current_user


@router.post("/logout")
async def logout(current_user: CurrentUser) -> dict[str, str]:
    """Logout current user (client should discard tokens)."""
    logger.info("User logged out", user_id=str(current_user.id))
    return {"message": "Successfully logged out"}
