"""Meeting service: workspace-scoped meeting CRUD with participant fan-out."""

from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from commandcenter.models.meeting import Meeting, MeetingParticipant, ParticipantRole
from commandcenter.models.project import Task
from commandcenter.services.access_control import authorize
from commandcenter.services.aggregation import AggregationService, MeetingsView
from commandcenter.services.membership import Caller, resolve_workspace
from commandcenter.services.validation import (
    MeetingCreate,
    MeetingUpdate,
    check_meeting_window,
    check_participants,
)
from commandcenter.utils.calendar import as_utc

logger = structlog.get_logger()


def build_participants(creator_id: UUID, participant_ids: list[UUID] | None) -> list[MeetingParticipant]:
    """
    Participant rows for a new meeting.

    None means the creator attends alone as organizer; an explicit list is
    taken as given (duplicates collapse, the creator is the organizer).
    """
    if participant_ids is None:
        return [MeetingParticipant(user_id=creator_id, role=ParticipantRole.ORGANIZER)]

    return [
        MeetingParticipant(
            user_id=user_id,
            role=ParticipantRole.ORGANIZER if user_id == creator_id else ParticipantRole.ATTENDEE,
        )
        for user_id in dict.fromkeys(participant_ids)
    ]


class MeetingService:
    """Service for the caller's meetings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _reload(self, meeting_id: UUID) -> Meeting:
        result = await self.db.execute(
            select(Meeting)
            .options(selectinload(Meeting.follow_up_tasks))
            .where(Meeting.id == meeting_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().one()

    async def list_meetings(
        self,
        caller: Caller,
        upcoming: bool | None = None,
        now: datetime | None = None,
    ) -> list[Meeting]:
        """
        Meetings in the caller's workspace.

        upcoming=True returns future meetings soonest first; upcoming=False
        returns past meetings most recent first; None returns everything,
        most recent first.
        """
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)
        now = as_utc(now or datetime.now(timezone.utc))

        query = select(Meeting).where(Meeting.workspace_id == membership.workspace_id)
        if upcoming is True:
            query = query.where(Meeting.start_time >= now).order_by(Meeting.start_time.asc())
        elif upcoming is False:
            query = query.where(Meeting.start_time < now).order_by(Meeting.start_time.desc())
        else:
            query = query.order_by(Meeting.start_time.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_meeting(self, caller: Caller, data: MeetingCreate) -> Meeting:
        """Create a meeting and its participants in one transaction."""
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)
        if data.participant_ids:
            await check_participants(self.db, membership.workspace_id, data.participant_ids)

        meeting = Meeting(
            workspace_id=membership.workspace_id,
            title=data.title,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            notes=data.notes,
        )
        meeting.participants = build_participants(caller.user_id, data.participant_ids)
        self.db.add(meeting)
        await self.db.commit()
        meeting = await self._reload(meeting.id)

        logger.info(
            "Meeting created",
            meeting_id=str(meeting.id),
            workspace_id=str(membership.workspace_id),
            participants=len(meeting.participants),
        )
        return meeting

    async def get_meeting(self, caller: Caller, meeting_id: UUID) -> Meeting:
        """Meeting with participants and follow-up tasks."""
        return await authorize(
            self.db,
            caller.user_id,
            Meeting,
            meeting_id,
            caller.workspace_id,
            options=[selectinload(Meeting.follow_up_tasks)],
        )

    async def update_meeting(
        self,
        caller: Caller,
        meeting_id: UUID,
        updates: MeetingUpdate,
    ) -> Meeting:
        meeting = await authorize(self.db, caller.user_id, Meeting, meeting_id, caller.workspace_id)
        update_data = updates.changes()

        start_time = update_data.get("start_time", meeting.start_time)
        end_time = update_data["end_time"] if "end_time" in update_data else meeting.end_time
        check_meeting_window(as_utc(start_time), as_utc(end_time) if end_time else None)

        for field, value in update_data.items():
            setattr(meeting, field, value)

        await self.db.commit()
        meeting = await self._reload(meeting_id)

        logger.info("Meeting updated", meeting_id=str(meeting_id), fields=sorted(update_data))
        return meeting

    async def delete_meeting(self, caller: Caller, meeting_id: UUID) -> None:
        """Delete a meeting and its participants; follow-up tasks are unlinked."""
        meeting = await authorize(self.db, caller.user_id, Meeting, meeting_id, caller.workspace_id)

        await self.db.execute(
            update(Task)
            .where(Task.meeting_id == meeting_id)
            .values(meeting_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.db.delete(meeting)
        await self.db.commit()

        logger.info("Meeting deleted", meeting_id=str(meeting_id))

    async def overview(self, caller: Caller, now: datetime | None = None) -> MeetingsView:
        membership = await resolve_workspace(self.db, caller.user_id, caller.workspace_id)
        return await AggregationService(self.db).meetings(
            membership.workspace_id, now or datetime.now(timezone.utc)
        )
