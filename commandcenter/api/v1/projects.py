"""Projects API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.api.v1.auth import CurrentCaller
from commandcenter.api.v1.tasks import DeleteResponse, TaskResponse
from commandcenter.db.session import get_db_session
from commandcenter.models.project import Project, TaskStatus
from commandcenter.services.aggregation import KanbanView, ProjectProgress
from commandcenter.services.projects import ProjectDetail, ProjectService
from commandcenter.services.validation import ProjectCreate, ProjectUpdate, UTCDateTime

router = APIRouter()


class ProjectResponse(BaseModel):
    """Project response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    name: str
    description: str | None
    color: str | None
    status: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


class ProjectListItem(ProjectResponse):
    total_tasks: int
    completed_tasks: int
    completion_percentage: int


class ProjectDetailResponse(ProjectResponse):
    tasks: list[TaskResponse]
    completion_percentage: int


class KanbanColumn(BaseModel):
    status: TaskStatus
    tasks: list[TaskResponse]


class KanbanResponse(BaseModel):
    """Board columns in fixed order: BACKLOG, TODO, IN_PROGRESS, DONE."""

    project: ProjectResponse
    columns: list[KanbanColumn]
    total_tasks: int
    completion_percentage: int


def _list_item(progress: ProjectProgress) -> ProjectListItem:
    base = ProjectResponse.model_validate(progress.project)
    return ProjectListItem(
        **base.model_dump(),
        total_tasks=progress.total_tasks,
        completed_tasks=progress.completed_tasks,
        completion_percentage=progress.completion_percentage,
    )


@router.get("/", response_model=list[ProjectListItem])
async def list_projects(
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
    status_filter: str | None = Query(None, alias="status"),
) -> list[ProjectListItem]:
    """List projects, newest first, with task completion."""
    progress = await ProjectService(db).list_projects(caller, status=status_filter)
    return [_list_item(p) for p in progress]


@router.get("/overview", response_model=list[ProjectListItem])
async def projects_overview(
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> list[ProjectListItem]:
    """Active projects with completion percentages."""
    progress = await ProjectService(db).overview(caller)
    return [_list_item(p) for p in progress]


@router.post("/", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Project:
    """Create a new project."""
    return await ProjectService(db).create_project(caller, project_data)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectDetailResponse:
    """Get a project with its tasks."""
    detail: ProjectDetail = await ProjectService(db).get_project(caller, project_id)
    base = ProjectResponse.model_validate(detail.project)
    return ProjectDetailResponse(
        **base.model_dump(),
        tasks=[TaskResponse.model_validate(t) for t in detail.tasks],
        completion_percentage=detail.completion_percentage,
    )


@router.get("/{project_id}/board", response_model=KanbanResponse)
async def get_project_board(
    project_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> KanbanResponse:
    """Kanban grouping of a project's tasks."""
    board: KanbanView = await ProjectService(db).board(caller, project_id)
    return KanbanResponse(
        project=ProjectResponse.model_validate(board.project),
        columns=[
            KanbanColumn(
                status=column,
                tasks=[TaskResponse.model_validate(t) for t in tasks],
            )
            for column, tasks in board.columns.items()
        ],
        total_tasks=board.total_tasks,
        completion_percentage=board.completion_percentage,
    )


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Project:
    """Update a project."""
    return await ProjectService(db).update_project(caller, project_id, project_data)


@router.delete("/{project_id}", response_model=DeleteResponse)
async def delete_project(
    project_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    """Delete a project. Its tasks remain, without a project."""
    await ProjectService(db).delete_project(caller, project_id)
    return DeleteResponse()
