"""Dashboard API endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from commandcenter.api.v1.auth import CurrentCaller
from commandcenter.api.v1.meetings import MeetingResponse
from commandcenter.api.v1.summaries import WeeklySummaryResponse
from commandcenter.api.v1.tasks import TaskResponse
from commandcenter.db.session import DBSession
from commandcenter.services.aggregation import AggregationService
from commandcenter.services.membership import resolve_workspace

router = APIRouter()


# --- Schemas ---


class DashboardStatsResponse(BaseModel):
    """Task counts over the whole workspace."""
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    overdue_tasks: int


class DashboardResponse(BaseModel):
    """Everything the dashboard page shows."""
    today_tasks: list[TaskResponse]
    upcoming_tasks: list[TaskResponse]
    meetings: list[MeetingResponse]
    stats: DashboardStatsResponse
    latest_summary: WeeklySummaryResponse | None


# --- Endpoints ---


@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    caller: CurrentCaller,
    db: DBSession,
) -> DashboardResponse:
    """Today's focus, upcoming work, this week's meetings and task stats."""
    membership = await resolve_workspace(db, caller.user_id, caller.workspace_id)
    view = await AggregationService(db).dashboard(
        membership.workspace_id, datetime.now(timezone.utc)
    )

    return DashboardResponse(
        today_tasks=[TaskResponse.model_validate(t) for t in view.today_tasks],
        upcoming_tasks=[TaskResponse.model_validate(t) for t in view.upcoming_tasks],
        meetings=[MeetingResponse.model_validate(m) for m in view.meetings],
        stats=DashboardStatsResponse(
            total_tasks=view.stats.total_tasks,
            completed_tasks=view.stats.completed_tasks,
            in_progress_tasks=view.stats.in_progress_tasks,
            overdue_tasks=view.stats.overdue_tasks,
        ),
        latest_summary=(
            WeeklySummaryResponse.model_validate(view.latest_summary)
            if view.latest_summary
            else None
        ),
    )
