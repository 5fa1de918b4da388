"""Task service: workspace-scoped task CRUD."""

from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.models.project import Task, TaskStatus
from commandcenter.services.access_control import authorize
from commandcenter.services.aggregation import PRIORITY_ORDER
from commandcenter.services.membership import Caller, resolve_workspace
from commandcenter.services.validation import (
    TaskCreate,
    TaskUpdate,
    check_task_references,
    completion_time,
)

logger = structlog.get_logger()


class TaskService:
    """Service for reading and mutating tasks within the caller's workspace."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _reload(self, task_id: UUID) -> Task:
        # Fresh server-side timestamps and eager relationships after commit
        result = await self.db.execute(
            select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
        )
        return result.scalars().one()

    async def list_tasks(
        self,
        caller: Caller,
        project_id: UUID | None = None,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        """Tasks in the caller's workspace, highest priority then newest first."""
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)

        query = select(Task).where(Task.workspace_id == membership.workspace_id)
        if project_id:
            query = query.where(Task.project_id == project_id)
        if status:
            query = query.where(Task.status == status)
        query = query.order_by(PRIORITY_ORDER.desc(), Task.created_at.desc(), Task.id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_task(
        self,
        caller: Caller,
        data: TaskCreate,
        now: datetime | None = None,
    ) -> Task:
        """Create a task in the caller's workspace."""
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)
        await check_task_references(
            self.db,
            membership.workspace_id,
            project_id=data.project_id,
            meeting_id=data.meeting_id,
            owner_id=data.owner_id,
        )

        task = Task(
            title=data.title,
            description=data.description,
            priority=data.priority,
            status=data.status,
            due_date=data.due_date,
            workspace_id=membership.workspace_id,
            project_id=data.project_id,
            owner_id=data.owner_id,
            meeting_id=data.meeting_id,
            created_by_id=caller.user_id,
            completed_at=completion_time(
                None, data.status, None, now or datetime.now(timezone.utc)
            ),
        )
        self.db.add(task)
        await self.db.commit()
        task = await self._reload(task.id)

        logger.info(
            "Task created",
            task_id=str(task.id),
            workspace_id=str(membership.workspace_id),
            project_id=str(data.project_id) if data.project_id else None,
        )
        return task

    async def get_task(self, caller: Caller, task_id: UUID) -> Task:
        return await authorize(self.db, caller.user_id, Task, task_id, caller.workspace_id)

    async def update_task(
        self,
        caller: Caller,
        task_id: UUID,
        updates: TaskUpdate,
        now: datetime | None = None,
    ) -> Task:
        """Apply a partial update; moving into DONE stamps completed_at."""
        task = await authorize(self.db, caller.user_id, Task, task_id, caller.workspace_id)
        update_data = updates.changes()

        await check_task_references(
            self.db,
            task.workspace_id,
            project_id=update_data.get("project_id"),
            meeting_id=update_data.get("meeting_id"),
            owner_id=update_data.get("owner_id"),
        )

        old_status = task.status
        if "status" in update_data:
            task.completed_at = completion_time(
                old_status,
                update_data["status"],
                task.completed_at,
                now or datetime.now(timezone.utc),
            )

        for field, value in update_data.items():
            setattr(task, field, value)

        await self.db.commit()
        task = await self._reload(task_id)

        logger.info(
            "Task updated",
            task_id=str(task_id),
            fields=sorted(update_data),
            old_status=old_status.value,
            new_status=task.status.value,
        )
        return task

    async def delete_task(self, caller: Caller, task_id: UUID) -> None:
        task = await authorize(self.db, caller.user_id, Task, task_id, caller.workspace_id)

        await self.db.delete(task)
        await self.db.commit()

        logger.info("Task deleted", task_id=str(task_id))
