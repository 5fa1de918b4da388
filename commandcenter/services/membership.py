"""Workspace membership resolution.

A user may belong to several workspaces. Unless the caller names one
explicitly, the earliest-joined membership is the canonical workspace.
"""

import re
from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.models.user import User
from commandcenter.models.workspace import Workspace, WorkspaceRole, WorkspaceUser
from commandcenter.services.exceptions import InvalidPayloadError, NoWorkspaceError

logger = structlog.get_logger()


@dataclass(frozen=True)
class Caller:
    """Explicit identity for one request: who is asking, and in which workspace."""

    user_id: UUID
    workspace_id: UUID | None = None  # explicit selector; None = earliest membership


@dataclass(frozen=True)
class WorkspaceMembership:
    """The caller's resolved tenancy for one request."""

    user_id: UUID
    workspace_id: UUID
    role: WorkspaceRole
    workspace: Workspace


def _to_membership(member: WorkspaceUser) -> WorkspaceMembership:
    return WorkspaceMembership(
        user_id=member.user_id,
        workspace_id=member.workspace_id,
        role=member.role,
        workspace=member.workspace,
    )


async def resolve_workspace(
    db: AsyncSession,
    user_id: UUID,
    workspace_id: UUID | None = None,
) -> WorkspaceMembership:
    """
    Resolve the workspace a user is acting in.

    Args:
        db: Database session
        user_id: Authenticated user id
        workspace_id: Explicit workspace selector; must be one of the user's memberships

    Returns:
        WorkspaceMembership for the selected (or first) workspace

    Raises:
        NoWorkspaceError if the user has no matching membership
    """
    query = select(WorkspaceUser).where(WorkspaceUser.user_id == user_id)
    if workspace_id is not None:
        query = query.where(WorkspaceUser.workspace_id == workspace_id)
    query = query.order_by(WorkspaceUser.created_at.asc(), WorkspaceUser.id.asc()).limit(1)

    result = await db.execute(query)
    member = result.scalars().first()
    if member is None:
        raise NoWorkspaceError()

    return _to_membership(member)


async def list_memberships(db: AsyncSession, user_id: UUID) -> list[WorkspaceMembership]:
    """All workspaces a user belongs to, earliest-joined first."""
    result = await db.execute(
        select(WorkspaceUser)
        .where(WorkspaceUser.user_id == user_id)
        .order_by(WorkspaceUser.created_at.asc(), WorkspaceUser.id.asc())
    )
    return [_to_membership(m) for m in result.scalars().all()]


async def get_member_ids(
    db: AsyncSession,
    workspace_id: UUID,
    user_ids: list[UUID] | set[UUID],
) -> set[UUID]:
    """Return the subset of user_ids that are members of the workspace."""
    if not user_ids:
        return set()
    result = await db.execute(
        select(WorkspaceUser.user_id).where(
            WorkspaceUser.workspace_id == workspace_id,
            WorkspaceUser.user_id.in_(list(user_ids)),
        )
    )
    return {row[0] for row in result.all()}


def generate_workspace_slug(name: str) -> str:
    """
    Derive a URL slug from a workspace name.

    Example: "Alex's Startup" -> "alex-s-startup"
    """
    slug = name.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = re.sub(r"^-+|-+$", "", slug)  # Trim leading/trailing hyphens
    slug = re.sub(r"-+", "-", slug)  # Collapse multiple hyphens
    return slug[:100]


async def create_workspace(
    db: AsyncSession,
    user: User,
    name: str,
    slug: str | None = None,
) -> WorkspaceMembership:
    """
    Create a workspace with the user as its owner.

    The workspace row and the owner membership are committed together.

    Raises:
        InvalidPayloadError if the slug is empty or already taken
    """
    slug = slug or generate_workspace_slug(name)
    if not slug:
        raise InvalidPayloadError("slug", "Workspace slug could not be derived from name")

    result = await db.execute(select(Workspace.id).where(Workspace.slug == slug))
    if result.scalar_one_or_none() is not None:
        raise InvalidPayloadError("slug", f"Workspace slug '{slug}' is already taken")

    workspace = Workspace(name=name, slug=slug)
    db.add(workspace)
    await db.flush()

    member = WorkspaceUser(
        workspace_id=workspace.id,
        user_id=user.id,
        role=WorkspaceRole.OWNER,
    )
    db.add(member)
    await db.commit()

    logger.info(
        "Workspace created",
        workspace_id=str(workspace.id),
        slug=slug,
        owner_id=str(user.id),
    )

    return WorkspaceMembership(
        user_id=user.id,
        workspace_id=workspace.id,
        role=WorkspaceRole.OWNER,
        workspace=workspace,
    )
