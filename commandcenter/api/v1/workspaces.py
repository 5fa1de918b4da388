"""Workspace onboarding and membership endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.api.v1.auth import CurrentCaller, CurrentUser
from commandcenter.db.session import get_db_session
from commandcenter.models.workspace import WorkspaceRole
from commandcenter.services.membership import (
    WorkspaceMembership,
    create_workspace,
    list_memberships,
    resolve_workspace,
)
from commandcenter.services.validation import Name, PayloadModel

router = APIRouter()


class WorkspaceCreate(PayloadModel):
    """Create a workspace owned by the caller."""

    name: Name
    slug: str | None = Field(None, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class WorkspaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str


class MembershipResponse(BaseModel):
    """The caller's membership in one workspace."""

    workspace: WorkspaceResponse
    role: WorkspaceRole


def _membership_response(membership: WorkspaceMembership) -> MembershipResponse:
    return MembershipResponse(
        workspace=WorkspaceResponse.model_validate(membership.workspace),
        role=membership.role,
    )


@router.get("/", response_model=list[MembershipResponse])
async def list_workspaces(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db_session),
) -> list[MembershipResponse]:
    """All of the caller's workspaces, earliest joined first."""
    memberships = await list_memberships(db, current_user.id)
    return [_membership_response(m) for m in memberships]


@router.get("/current", response_model=MembershipResponse)
async def get_current_workspace(
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> MembershipResponse:
    """The workspace requests are scoped to. 404 means onboarding is pending."""
    membership = await resolve_workspace(db, caller.user_id, caller.workspace_id)
    return _membership_response(membership)


@router.post("/", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
async def create_new_workspace(
    workspace_data: WorkspaceCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db_session),
) -> MembershipResponse:
    """Create a workspace with the caller as owner."""
    membership = await create_workspace(db, current_user, workspace_data.name, workspace_data.slug)
    return _membership_response(membership)
