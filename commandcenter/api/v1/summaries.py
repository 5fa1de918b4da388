"""Weekly summary API endpoints."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, ConfigDict

from commandcenter.api.v1.auth import CurrentCaller
from commandcenter.db.session import DBSession
from commandcenter.models.summary import WeeklySummary
from commandcenter.services.aggregation import AggregationService
from commandcenter.services.exceptions import EntityNotFoundError
from commandcenter.services.membership import resolve_workspace
from commandcenter.services.summary import WeeklySummaryService
from commandcenter.services.validation import UTCDateTime

router = APIRouter()


class WeeklySummaryResponse(BaseModel):
    """Weekly summary response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    week_start_date: UTCDateTime
    week_end_date: UTCDateTime
    summary: str
    tasks_completed: int
    tasks_created: int
    meetings_held: int
    top_priorities: list[str]
    generated_at: UTCDateTime


@router.get("/", response_model=list[WeeklySummaryResponse])
async def list_summaries(
    caller: CurrentCaller,
    db: DBSession,
    limit: int = Query(20, ge=1, le=100),
) -> list[WeeklySummary]:
    """Summaries for the caller's workspace, newest first."""
    membership = await resolve_workspace(db, caller.user_id, caller.workspace_id)
    return await WeeklySummaryService(db).list_summaries(membership.workspace_id, limit=limit)


@router.get("/latest", response_model=WeeklySummaryResponse)
async def latest_summary(
    caller: CurrentCaller,
    db: DBSession,
) -> WeeklySummary:
    """The current summary (newest generated_at)."""
    membership = await resolve_workspace(db, caller.user_id, caller.workspace_id)
    summary = await AggregationService(db).latest_summary(membership.workspace_id)
    if summary is None:
        raise EntityNotFoundError("WeeklySummary")
    return summary


@router.post(
    "/generate",
    response_model=WeeklySummaryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_summary(
    caller: CurrentCaller,
    db: DBSession,
) -> WeeklySummary:
    """Compute this week's rollup and append it."""
    membership = await resolve_workspace(db, caller.user_id, caller.workspace_id)
    return await WeeklySummaryService(db).generate(
        membership.workspace_id, datetime.now(timezone.utc)
    )
