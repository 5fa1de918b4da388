"""Project service: workspace-scoped project CRUD and board views."""

from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from commandcenter.models.project import Project, Task, TaskStatus
from commandcenter.services.access_control import authorize
from commandcenter.services.aggregation import (
    AggregationService,
    KanbanView,
    ProjectProgress,
    completion_percentage,
)
from commandcenter.services.membership import Caller, resolve_workspace
from commandcenter.services.validation import ProjectCreate, ProjectUpdate

logger = structlog.get_logger()


@dataclass
class ProjectDetail:
    project: Project
    tasks: list[Task]
    completion_percentage: int


class ProjectService:
    """Service for the caller's projects."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_projects(self, caller: Caller, status: str | None = None) -> list[ProjectProgress]:
        """Projects in the caller's workspace with task counts, newest first."""
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)
        return await AggregationService(self.db).project_progress(membership.workspace_id, status)

    async def create_project(self, caller: Caller, data: ProjectCreate) -> Project:
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)

        project = Project(
            workspace_id=membership.workspace_id,
            name=data.name,
            description=data.description,
            color=data.color,
            status=data.status,
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)

        logger.info(
            "Project created",
            project_id=str(project.id),
            workspace_id=str(membership.workspace_id),
        )
        return project

    async def get_project(self, caller: Caller, project_id: UUID) -> ProjectDetail:
        """Project with its tasks and completion percentage."""
        project = await authorize(
            self.db,
            caller.user_id,
            Project,
            project_id,
            caller.workspace_id,
            options=[selectinload(Project.tasks)],
        )
        tasks = sorted(project.tasks, key=lambda t: (t.created_at, str(t.id)))
        done = sum(1 for t in tasks if t.status is TaskStatus.DONE)
        return ProjectDetail(
            project=project,
            tasks=tasks,
            completion_percentage=completion_percentage(done, len(tasks)),
        )

    async def update_project(
        self,
        caller: Caller,
        project_id: UUID,
        updates: ProjectUpdate,
    ) -> Project:
        project = await authorize(self.db, caller.user_id, Project, project_id, caller.workspace_id)
        update_data = updates.changes()

        for field, value in update_data.items():
            setattr(project, field, value)

        await self.db.commit()
        await self.db.refresh(project)

        logger.info("Project updated", project_id=str(project_id), fields=sorted(update_data))
        return project

    async def delete_project(self, caller: Caller, project_id: UUID) -> None:
        """Delete a project. Its tasks stay in the workspace without a project."""
        project = await authorize(self.db, caller.user_id, Project, project_id, caller.workspace_id)

        orphaned = await self.db.execute(
            update(Task)
            .where(Task.project_id == project_id)
            .values(project_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.db.delete(project)
        await self.db.commit()

        logger.info(
            "Project deleted",
            project_id=str(project_id),
            orphaned_tasks=orphaned.rowcount,
        )

    async def board(self, caller: Caller, project_id: UUID) -> KanbanView:
        project = await authorize(self.db, caller.user_id, Project, project_id, caller.workspace_id)
        return await AggregationService(self.db).kanban(project)

    async def overview(self, caller: Caller) -> list[ProjectProgress]:
        """Active projects only, as shown on the projects page."""
        return await self.list_projects(caller, status="active")
