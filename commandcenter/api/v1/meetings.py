"""Meetings API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.api.v1.auth import CurrentCaller, UserResponse
from commandcenter.api.v1.tasks import DeleteResponse, TaskResponse
from commandcenter.db.session import get_db_session
from commandcenter.models.meeting import Meeting, ParticipantRole
from commandcenter.services.aggregation import MeetingsView
from commandcenter.services.meetings import MeetingService
from commandcenter.services.validation import MeetingCreate, MeetingUpdate, UTCDateTime

router = APIRouter()


class ParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    role: ParticipantRole
    user: UserResponse


class MeetingResponse(BaseModel):
    """Meeting with its participants."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    title: str
    description: str | None
    start_time: UTCDateTime
    end_time: UTCDateTime | None
    notes: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    participants: list[ParticipantResponse]


class MeetingDetailResponse(MeetingResponse):
    follow_up_tasks: list[TaskResponse]


class MeetingsOverviewResponse(BaseModel):
    upcoming: list[MeetingDetailResponse]
    past: list[MeetingDetailResponse]


@router.get("/", response_model=list[MeetingResponse])
async def list_meetings(
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
    upcoming: bool | None = Query(None),
) -> list[Meeting]:
    """List meetings; ``upcoming`` narrows to future or past ones."""
    return await MeetingService(db).list_meetings(caller, upcoming=upcoming)


@router.get("/overview", response_model=MeetingsOverviewResponse)
async def meetings_overview(
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> MeetingsOverviewResponse:
    """Upcoming (soonest first) and past (most recent first) meetings."""
    view: MeetingsView = await MeetingService(db).overview(caller)
    return MeetingsOverviewResponse(
        upcoming=[MeetingDetailResponse.model_validate(m) for m in view.upcoming],
        past=[MeetingDetailResponse.model_validate(m) for m in view.past],
    )


@router.post("/", response_model=MeetingResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    meeting_data: MeetingCreate,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Meeting:
    """Create a meeting together with its participants."""
    return await MeetingService(db).create_meeting(caller, meeting_data)


@router.get("/{meeting_id}", response_model=MeetingDetailResponse)
async def get_meeting(
    meeting_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Meeting:
    """Get a meeting with participants and follow-up tasks."""
    return await MeetingService(db).get_meeting(caller, meeting_id)


@router.patch("/{meeting_id}", response_model=MeetingDetailResponse)
async def update_meeting(
    meeting_id: UUID,
    meeting_data: MeetingUpdate,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> Meeting:
    """Update a meeting."""
    return await MeetingService(db).update_meeting(caller, meeting_id, meeting_data)


@router.delete("/{meeting_id}", response_model=DeleteResponse)
async def delete_meeting(
    meeting_id: UUID,
    caller: CurrentCaller,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    """Delete a meeting; follow-up tasks are kept and unlinked."""
    await MeetingService(db).delete_meeting(caller, meeting_id)
    return DeleteResponse()
