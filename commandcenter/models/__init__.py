"""SQLAlchemy models package."""

from commandcenter.models.user import User
from commandcenter.models.workspace import Workspace, WorkspaceRole, WorkspaceUser
from commandcenter.models.project import (
    PRIORITY_RANK,
    Project,
    Task,
    TaskPriority,
    TaskStatus,
)
from commandcenter.models.meeting import Meeting, MeetingParticipant, ParticipantRole
from commandcenter.models.summary import WeeklySummary

__all__ = [
    # User & Workspace
    "User",
    "Workspace",
    "WorkspaceRole",
    "WorkspaceUser",
    # Projects & Tasks
    "PRIORITY_RANK",
    "Project",
    "Task",
    "TaskPriority",
    "TaskStatus",
    # Meetings
    "Meeting",
    "MeetingParticipant",
    "ParticipantRole",
    # Summaries
    "WeeklySummary",
]
