"""Read-only aggregate views over a workspace's tasks, projects and meetings.

Views are recomputed from stored state on every call; nothing here writes.
The dashboard issues several independent reads, so its counts are only as
mutually consistent as read-committed isolation makes them.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from commandcenter.config import Settings, get_settings
from commandcenter.models.meeting import Meeting
from commandcenter.models.project import PRIORITY_RANK, Project, Task, TaskPriority, TaskStatus
from commandcenter.models.summary import WeeklySummary
from commandcenter.utils.calendar import (
    as_utc,
    end_of_week,
    get_zone,
    start_of_day,
    start_of_next_day,
    start_of_week,
)

logger = structlog.get_logger()

KANBAN_COLUMNS: tuple[TaskStatus, ...] = (
    TaskStatus.BACKLOG,
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
)

# SQL rendering of PRIORITY_RANK (higher sorts first)
PRIORITY_ORDER = case(
    (Task.priority == TaskPriority.URGENT, PRIORITY_RANK[TaskPriority.URGENT]),
    (Task.priority == TaskPriority.HIGH, PRIORITY_RANK[TaskPriority.HIGH]),
    (Task.priority == TaskPriority.MEDIUM, PRIORITY_RANK[TaskPriority.MEDIUM]),
    (Task.priority == TaskPriority.LOW, PRIORITY_RANK[TaskPriority.LOW]),
    else_=0,
)


# --- Result records ---


@dataclass
class DashboardStats:
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    overdue_tasks: int


@dataclass
class DashboardView:
    today_tasks: list[Task]
    upcoming_tasks: list[Task]
    meetings: list[Meeting]
    stats: DashboardStats
    latest_summary: WeeklySummary | None


@dataclass
class KanbanView:
    project: Project
    columns: dict[TaskStatus, list[Task]]
    completion_percentage: int

    @property
    def total_tasks(self) -> int:
        return sum(len(tasks) for tasks in self.columns.values())


@dataclass
class MeetingsView:
    upcoming: list[Meeting] = field(default_factory=list)
    past: list[Meeting] = field(default_factory=list)


@dataclass
class ProjectProgress:
    project: Project
    total_tasks: int
    completed_tasks: int
    completion_percentage: int


# --- Pure helpers ---


def priority_sort_key(task: Task) -> tuple[int, bool, datetime]:
    """Priority descending, then due date ascending with undated tasks last."""
    due = as_utc(task.due_date) if task.due_date is not None else datetime.max.replace(tzinfo=timezone.utc)
    return (-PRIORITY_RANK[task.priority], task.due_date is None, due)


def sort_by_priority(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=priority_sort_key)


def completion_percentage(done: int, total: int) -> int:
    """round(100 * done / total), halves rounded up; 0 for an empty set."""
    if total <= 0:
        return 0
    return (200 * done + total) // (2 * total)


def group_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, list[Task]]:
    """Kanban columns in board order; tasks keep their incoming order."""
    columns: dict[TaskStatus, list[Task]] = {status: [] for status in KANBAN_COLUMNS}
    for task in tasks:
        columns[task.status].append(task)
    return columns


def partition_meetings(meetings: Iterable[Meeting], now: datetime) -> MeetingsView:
    """Split into upcoming (soonest first) and past (most recent first)."""
    now = as_utc(now)
    upcoming = [m for m in meetings if as_utc(m.start_time) >= now]
    past = [m for m in meetings if as_utc(m.start_time) < now]
    upcoming.sort(key=lambda m: as_utc(m.start_time))
    past.sort(key=lambda m: as_utc(m.start_time), reverse=True)
    return MeetingsView(upcoming=upcoming, past=past)


def compute_stats(tasks: Sequence[Task], today_start: datetime) -> DashboardStats:
    """In-memory equivalent of the dashboard count queries."""
    today_start = as_utc(today_start)
    return DashboardStats(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.status is TaskStatus.DONE),
        in_progress_tasks=sum(1 for t in tasks if t.status is TaskStatus.IN_PROGRESS),
        overdue_tasks=sum(
            1
            for t in tasks
            if t.status is not TaskStatus.DONE
            and t.due_date is not None
            and as_utc(t.due_date) < today_start
        ),
    )


# --- Query service ---


class AggregationService:
    """Builds the aggregate views for one workspace."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.tz = get_zone(self.settings.timezone)

    async def _count(self, *conditions) -> int:
        result = await self.db.execute(select(func.count(Task.id)).where(*conditions))
        return result.scalar() or 0

    async def dashboard(self, workspace_id: UUID, now: datetime) -> DashboardView:
        """Today/upcoming tasks, this week's meetings, task stats and latest summary."""
        today_start = start_of_day(now, self.tz)
        tomorrow_start = start_of_next_day(now, self.tz)
        week_start = start_of_week(now, self.tz, self.settings.week_starts_on)
        week_end = end_of_week(now, self.tz, self.settings.week_starts_on)
        task_limit = self.settings.dashboard_task_limit

        today_result = await self.db.execute(
            select(Task)
            .where(Task.workspace_id == workspace_id)
            .where(
                or_(
                    and_(Task.due_date >= today_start, Task.due_date < tomorrow_start),
                    Task.status == TaskStatus.IN_PROGRESS,
                )
            )
            .order_by(PRIORITY_ORDER.desc(), Task.due_date.asc().nulls_last(), Task.id)
            .limit(task_limit)
        )
        today_tasks = list(today_result.scalars().all())

        upcoming_result = await self.db.execute(
            select(Task)
            .where(Task.workspace_id == workspace_id)
            .where(Task.status != TaskStatus.DONE)
            .where(Task.due_date >= tomorrow_start)
            .order_by(PRIORITY_ORDER.desc(), Task.due_date.asc().nulls_last(), Task.id)
            .limit(task_limit)
        )
        upcoming_tasks = list(upcoming_result.scalars().all())

        meetings_result = await self.db.execute(
            select(Meeting)
            .where(Meeting.workspace_id == workspace_id)
            .where(Meeting.start_time >= week_start, Meeting.start_time <= week_end)
            .order_by(Meeting.start_time.asc())
            .limit(self.settings.dashboard_meeting_limit)
        )
        meetings = list(meetings_result.scalars().all())

        in_workspace = Task.workspace_id == workspace_id
        stats = DashboardStats(
            total_tasks=await self._count(in_workspace),
            completed_tasks=await self._count(in_workspace, Task.status == TaskStatus.DONE),
            in_progress_tasks=await self._count(
                in_workspace, Task.status == TaskStatus.IN_PROGRESS
            ),
            overdue_tasks=await self._count(
                in_workspace,
                Task.status != TaskStatus.DONE,
                Task.due_date < today_start,
            ),
        )

        latest_summary = await self.latest_summary(workspace_id)

        logger.debug(
            "Dashboard computed",
            workspace_id=str(workspace_id),
            today=len(today_tasks),
            upcoming=len(upcoming_tasks),
            meetings=len(meetings),
        )

        return DashboardView(
            today_tasks=today_tasks,
            upcoming_tasks=upcoming_tasks,
            meetings=meetings,
            stats=stats,
            latest_summary=latest_summary,
        )

    async def latest_summary(self, workspace_id: UUID) -> WeeklySummary | None:
        result = await self.db.execute(
            select(WeeklySummary)
            .where(WeeklySummary.workspace_id == workspace_id)
            .order_by(WeeklySummary.generated_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def kanban(self, project: Project) -> KanbanView:
        """Group a project's tasks into the four board columns."""
        result = await self.db.execute(
            select(Task)
            .where(Task.project_id == project.id, Task.workspace_id == project.workspace_id)
            .order_by(Task.created_at.asc(), Task.id)
        )
        tasks = list(result.scalars().all())
        columns = group_by_status(tasks)

        return KanbanView(
            project=project,
            columns=columns,
            completion_percentage=completion_percentage(
                len(columns[TaskStatus.DONE]), len(tasks)
            ),
        )

    async def meetings(self, workspace_id: UUID, now: datetime) -> MeetingsView:
        """Upcoming/past split of the workspace's most recent meetings."""
        result = await self.db.execute(
            select(Meeting)
            .options(selectinload(Meeting.follow_up_tasks))
            .where(Meeting.workspace_id == workspace_id)
            .order_by(Meeting.start_time.desc())
            .limit(self.settings.meetings_page_limit)
        )
        return partition_meetings(result.scalars().all(), now)

    async def project_progress(
        self,
        workspace_id: UUID,
        status: str | None = None,
    ) -> list[ProjectProgress]:
        """Completion percentage for each project, newest first."""
        done_count = func.count(Task.id).filter(Task.status == TaskStatus.DONE)
        query = (
            select(Project, func.count(Task.id), done_count)
            .outerjoin(
                Task,
                and_(Task.project_id == Project.id, Task.workspace_id == Project.workspace_id),
            )
            .where(Project.workspace_id == workspace_id)
            .group_by(Project.id)
            .order_by(Project.created_at.desc())
        )
        if status:
            query = query.where(Project.status == status)

        result = await self.db.execute(query)
        return [
            ProjectProgress(
                project=project,
                total_tasks=total,
                completed_tasks=done,
                completion_percentage=completion_percentage(done, total),
            )
            for project, total, done in result.all()
        ]
