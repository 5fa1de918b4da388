"""Workspace access control.

Reads of a single entity, updates and deletes go through ``authorize``; list
and create operations are instead scoped to the caller's resolved workspace.
No code path returns or mutates an entity from another workspace.
"""

import enum
from collections.abc import Sequence
from typing import TypeVar
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from commandcenter.models.meeting import Meeting
from commandcenter.models.project import Project, Task
from commandcenter.services.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    NoWorkspaceError,
)
from commandcenter.services.membership import WorkspaceMembership, resolve_workspace

logger = structlog.get_logger()

ScopedEntity = TypeVar("ScopedEntity", Task, Project, Meeting)


class AccessDecision(str, enum.Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


def decide_access(
    entity_workspace_id: UUID | None,
    membership: WorkspaceMembership | None,
) -> AccessDecision:
    """Decide access given the entity's workspace (None = no such entity)."""
    if entity_workspace_id is None:
        return AccessDecision.NOT_FOUND
    if membership is None or membership.workspace_id != entity_workspace_id:
        return AccessDecision.FORBIDDEN
    return AccessDecision.ALLOWED


async def authorize(
    db: AsyncSession,
    user_id: UUID,
    model: type[ScopedEntity],
    entity_id: UUID,
    workspace_id: UUID | None = None,
    options: Sequence[ORMOption] = (),
) -> ScopedEntity:
    """
    Fetch an entity and confirm it belongs to the caller's workspace.

    Args:
        db: Database session
        user_id: Authenticated user id
        model: Task, Project or Meeting
        entity_id: Id of the entity to fetch
        workspace_id: Optional explicit workspace selector
        options: Loader options applied to the fetch

    Returns:
        The entity if access is allowed

    Raises:
        EntityNotFoundError if the entity does not exist
        ForbiddenError if it belongs to another workspace
    """
    result = await db.execute(select(model).options(*options).where(model.id == entity_id))
    entity = result.scalars().first()

    membership: WorkspaceMembership | None = None
    if entity is not None:
        try:
            membership = await resolve_workspace(db, user_id, workspace_id)
        except NoWorkspaceError:
            membership = None

    decision = decide_access(entity.workspace_id if entity is not None else None, membership)

    if decision is AccessDecision.NOT_FOUND:
        raise EntityNotFoundError(model.__name__, entity_id)
    if decision is AccessDecision.FORBIDDEN:
        logger.warning(
            "Cross-workspace access denied",
            entity=model.__name__,
            entity_id=str(entity_id),
            user_id=str(user_id),
        )
        raise ForbiddenError()

    return entity
