"""Tasks API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.api.v1.auth import CurrentCaller, UserResponse
from commandcenter.db.session import get_db_session
from commandcenter.models.project import Task, TaskPriority, TaskStatus
from commandcenter.services.tasks import TaskService
from commandcenter.services.validation import TaskCreate, TaskUpdate, UTCDateTime

router = APIRouter()


class ProjectBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: str | None


class TaskResponse(BaseModel):
    """Task response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: UTCDateTime | None
    completed_at: UTCDateTime | None
    workspace_id: UUID
    project_id: UUID | None
    owner_id: UUID | None
    created_by_id: UUID | None
    meeting_id: UUID | None
    created_at: UTCDateTime
    updated_at: UTCDateTime

    project: ProjectBrief | None = None
    owner: UserResponse | None = None


class DeleteResponse(BaseModel):
    success: bool = True


@router.get("/", response_model=list[TaskResponse])
async def list_tasks(
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
    project_id: UUID | None = Query(None, alias="projectId"),
    status_filter: TaskStatus | None = Query(None, alias="status"),
) -> list[Task]:
    """List tasks in the caller's workspace, highest priority first."""
    return await TaskService(db).list_tasks(caller, project_id=project_id, status=status_filter)


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Task:
    """Create a new task."""
    return await TaskService(db).create_task(caller, task_data)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Task:
    """Get a task by ID."""
    return await TaskService(db).get_task(caller, task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Task:
    """Update a task. Moving it to DONE records the completion time."""
    return await TaskService(db).update_task(caller, task_id, task_data)


@router.delete("/{task_id}", response_model=DeleteResponse)
async def delete_task(
    task_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    """Delete a task."""
    await TaskService(db).delete_task(caller, task_id)
    return DeleteResponse()
