"""Meeting and participant models."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commandcenter.db.base import BaseModel
from commandcenter.models.workspace import enum_values

if TYPE_CHECKING:
    from commandcenter.models.project import Task
    from commandcenter.models.user import User


class ParticipantRole(str, enum.Enum):
    ORGANIZER = "organizer"
    ATTENDEE = "attendee"


class Meeting(BaseModel):
    """Meeting held within a workspace."""

    __tablename__ = "meetings"

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    participants: Mapped[list["MeetingParticipant"]] = relationship(
        "MeetingParticipant", back_populates="meeting", lazy="selectin",
        cascade="all, delete-orphan"
    )
    # Back-reference only; follow-up tasks outlive the meeting
    follow_up_tasks: Mapped[list["Task"]] = relationship(
        "Task", back_populates="meeting", passive_deletes=True
    )

    def __repr__(self) -> str:
        try:
            return f"<Meeting {self.title[:30]}>"
        except Exception:
            return f"<Meeting id={self.id}>"


class MeetingParticipant(BaseModel):
    """Meeting participation with role."""

    __tablename__ = "meeting_participants"
    __table_args__ = (
        UniqueConstraint("meeting_id", "user_id", name="uq_meeting_participants_meeting_user"),
    )

    meeting_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[ParticipantRole] = mapped_column(
        Enum(ParticipantRole, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=ParticipantRole.ATTENDEE,
    )

    # Relationships
    meeting: Mapped["Meeting"] = relationship("Meeting", back_populates="participants")
    user: Mapped["User"] = relationship("User", lazy="joined")

    def __repr__(self) -> str:
        return f"<MeetingParticipant meeting={self.meeting_id} user={self.user_id}>"
