"""Create/update payload validation.

Payload models accept both snake_case and camelCase keys. Validation failures
surface as InvalidPayloadError naming the offending field.
"""

import enum
from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.models.meeting import Meeting
from commandcenter.models.project import (
    DEFAULT_PROJECT_STATUS,
    Project,
    TaskPriority,
    TaskStatus,
)
from commandcenter.services.exceptions import InvalidPayloadError
from commandcenter.services.membership import get_member_ids
from commandcenter.utils.calendar import as_utc


class EntityKind(str, enum.Enum):
    TASK = "task"
    PROJECT = "project"
    MEETING = "meeting"


def ensure_aware(value: datetime | None) -> datetime | None:
    """Normalize to UTC, treating naive timestamps as already UTC."""
    return as_utc(value) if value is not None else None


# Stored values may come back naive (sqlite); responses always carry UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


Title = Annotated[str, StringConstraints(min_length=1, max_length=500), AfterValidator(_not_blank)]
Name = Annotated[str, StringConstraints(min_length=1, max_length=255), AfterValidator(_not_blank)]


class PayloadModel(BaseModel):
    """Base for request payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Tasks
# =============================================================================


class TaskCreate(PayloadModel):
    """Create a new task."""

    title: Title
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    due_date: datetime | None = None
    project_id: UUID | None = None
    owner_id: UUID | None = None
    meeting_id: UUID | None = None

    @field_validator("priority", "status", mode="before")
    @classmethod
    def default_when_null(cls, v: Any, info) -> Any:
        if v is None or v == "":
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("due_date")
    @classmethod
    def due_date_aware(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v)


class TaskUpdate(PayloadModel):
    """Partial task update. Null title/priority/status mean "unchanged"."""

    title: Title | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None
    project_id: UUID | None = None
    owner_id: UUID | None = None
    meeting_id: UUID | None = None

    @field_validator("due_date")
    @classmethod
    def due_date_aware(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller."""
        data = self.model_dump(exclude_unset=True)
        for field in ("title", "priority", "status"):
            if field in data and data[field] is None:
                del data[field]
        return data


def completion_time(
    old_status: TaskStatus | None,
    new_status: TaskStatus,
    current: datetime | None,
    now: datetime,
) -> datetime | None:
    """
    completed_at after a status change.

    Moving into DONE stamps ``now``. Any other transition, including moving
    out of DONE, leaves the existing value untouched.
    """
    if new_status is TaskStatus.DONE and old_status is not TaskStatus.DONE:
        return now
    return current


# =============================================================================
# Projects
# =============================================================================


class ProjectCreate(PayloadModel):
    """Create a new project."""

    name: Name
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    status: str = Field(DEFAULT_PROJECT_STATUS, min_length=1, max_length=50)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return v or DEFAULT_PROJECT_STATUS


class ProjectUpdate(PayloadModel):
    """Partial project update."""

    name: Name | None = None
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    status: str | None = Field(None, min_length=1, max_length=50)

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        for field in ("name", "status"):
            if field in data and data[field] is None:
                del data[field]
        return data


# =============================================================================
# Meetings
# =============================================================================


def check_meeting_window(start_time: datetime, end_time: datetime | None) -> None:
    if end_time is not None and end_time < start_time:
        raise InvalidPayloadError("end_time", "End time must not be before start time")


class MeetingCreate(PayloadModel):
    """Create a new meeting.

    Omitting participant_ids makes the creator the sole organizer; an empty
    list creates the meeting without participants.
    """

    title: Title
    description: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    notes: str | None = None
    participant_ids: list[UUID] | None = None

    @field_validator("start_time")
    @classmethod
    def start_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: datetime | None, info) -> datetime | None:
        v = ensure_aware(v)
        start = info.data.get("start_time")
        if v is not None and start is not None and v < start:
            raise ValueError("must not be before start time")
        return v


class MeetingUpdate(PayloadModel):
    """Partial meeting update."""

    title: Title | None = None
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def times_aware(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v)

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        for field in ("title", "start_time"):
            if field in data and data[field] is None:
                del data[field]
        return data


# =============================================================================
# Entry points
# =============================================================================

CREATE_MODELS: dict[EntityKind, type[PayloadModel]] = {
    EntityKind.TASK: TaskCreate,
    EntityKind.PROJECT: ProjectCreate,
    EntityKind.MEETING: MeetingCreate,
}

UPDATE_MODELS: dict[EntityKind, type[PayloadModel]] = {
    EntityKind.TASK: TaskUpdate,
    EntityKind.PROJECT: ProjectUpdate,
    EntityKind.MEETING: MeetingUpdate,
}


def first_error(exc: ValidationError) -> InvalidPayloadError:
    """Reduce a pydantic error list to the first field-level reason."""
    errors = exc.errors()
    if not errors:
        return InvalidPayloadError(None, "Invalid payload")
    return error_from_details(errors[0])


def error_from_details(error: dict[str, Any]) -> InvalidPayloadError:
    loc = [
        str(part)
        for part in error.get("loc", ())
        if part not in ("body", "query", "path", "header")
    ]
    field = ".".join(loc) or None
    message = error.get("msg", "Invalid value")
    return InvalidPayloadError(field, f"{field}: {message}" if field else message)


def validate_create(kind: EntityKind, payload: dict[str, Any]) -> PayloadModel:
    """Validate a create payload, applying defaults."""
    try:
        return CREATE_MODELS[kind].model_validate(payload)
    except ValidationError as e:
        raise first_error(e) from e


def validate_update(kind: EntityKind, payload: dict[str, Any]) -> PayloadModel:
    """Validate a partial update payload."""
    try:
        return UPDATE_MODELS[kind].model_validate(payload)
    except ValidationError as e:
        raise first_error(e) from e


# =============================================================================
# Referential tenancy
# =============================================================================


async def check_task_references(
    db: AsyncSession,
    workspace_id: UUID,
    project_id: UUID | None = None,
    meeting_id: UUID | None = None,
    owner_id: UUID | None = None,
) -> None:
    """
    Ensure a task only links to entities in its own workspace.

    Raises:
        InvalidPayloadError naming the first offending reference
    """
    if project_id is not None:
        result = await db.execute(select(Project.workspace_id).where(Project.id == project_id))
        if result.scalar_one_or_none() != workspace_id:
            raise InvalidPayloadError("project_id", "Project not found in workspace")

    if meeting_id is not None:
        result = await db.execute(select(Meeting.workspace_id).where(Meeting.id == meeting_id))
        if result.scalar_one_or_none() != workspace_id:
            raise InvalidPayloadError("meeting_id", "Meeting not found in workspace")

    if owner_id is not None:
        if owner_id not in await get_member_ids(db, workspace_id, [owner_id]):
            raise InvalidPayloadError("owner_id", "Owner is not a member of the workspace")


async def check_participants(
    db: AsyncSession,
    workspace_id: UUID,
    participant_ids: list[UUID],
) -> None:
    """Every meeting participant must belong to the meeting's workspace."""
    members = await get_member_ids(db, workspace_id, set(participant_ids))
    outsiders = [pid for pid in participant_ids if pid not in members]
    if outsiders:
        raise InvalidPayloadError(
            "participant_ids",
            f"Not workspace members: {', '.join(str(pid) for pid in outsiders)}",
        )
