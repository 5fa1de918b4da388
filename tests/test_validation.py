"""Tests for create/update payload validation."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from commandcenter.models.project import TaskPriority, TaskStatus
from commandcenter.services.exceptions import InvalidPayloadError
from commandcenter.services.validation import (
    EntityKind,
    MeetingUpdate,
    TaskUpdate,
    check_meeting_window,
    completion_time,
    validate_create,
    validate_update,
)

NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


class TestTaskCreate:
    def test_title_only_gets_defaults(self):
        task = validate_create(EntityKind.TASK, {"title": "X"})

        assert task.title == "X"
        assert task.priority is TaskPriority.MEDIUM
        assert task.status is TaskStatus.TODO
        assert task.due_date is None

    def test_null_enums_fall_back_to_defaults(self):
        task = validate_create(EntityKind.TASK, {"title": "X", "priority": None, "status": ""})
        assert task.priority is TaskPriority.MEDIUM
        assert task.status is TaskStatus.TODO

    @pytest.mark.parametrize("payload", [{}, {"title": ""}, {"title": "   "}])
    def test_title_required(self, payload):
        with pytest.raises(InvalidPayloadError) as exc_info:
            validate_create(EntityKind.TASK, payload)
        assert exc_info.value.field == "title"

    def test_unknown_priority_rejected(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            validate_create(EntityKind.TASK, {"title": "X", "priority": "CRITICAL"})
        assert exc_info.value.field == "priority"

    def test_unparseable_due_date_rejected(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            validate_create(EntityKind.TASK, {"title": "X", "dueDate": "next tuesday"})
        assert exc_info.value.field == "dueDate"

    def test_accepts_camel_and_snake_case(self):
        project_id = uuid4()
        camel = validate_create(EntityKind.TASK, {"title": "X", "projectId": str(project_id)})
        snake = validate_create(EntityKind.TASK, {"title": "X", "project_id": str(project_id)})
        assert camel.project_id == snake.project_id == project_id

    def test_due_date_normalized_to_utc(self):
        task = validate_create(EntityKind.TASK, {"title": "X", "dueDate": "2026-10-14T09:00:00+02:00"})
        assert task.due_date == datetime(2026, 10, 14, 7, 0, tzinfo=timezone.utc)


class TestTaskUpdate:
    def test_changes_only_include_supplied_fields(self):
        update = validate_update(EntityKind.TASK, {"status": "DONE"})
        assert update.changes() == {"status": TaskStatus.DONE}

    def test_null_title_means_unchanged(self):
        update = TaskUpdate.model_validate({"title": None, "ownerId": None})
        assert update.changes() == {"owner_id": None}


class TestCompletionTime:
    def test_entering_done_stamps_now(self):
        assert completion_time(TaskStatus.TODO, TaskStatus.DONE, None, NOW) == NOW

    def test_creating_as_done_stamps_now(self):
        assert completion_time(None, TaskStatus.DONE, None, NOW) == NOW

    def test_leaving_done_keeps_existing_value(self):
        earlier = NOW - timedelta(days=2)
        assert completion_time(TaskStatus.DONE, TaskStatus.TODO, earlier, NOW) == earlier

    def test_done_to_done_is_not_a_transition(self):
        earlier = NOW - timedelta(days=2)
        assert completion_time(TaskStatus.DONE, TaskStatus.DONE, earlier, NOW) == earlier


class TestProjectCreate:
    def test_status_defaults_to_active(self):
        project = validate_create(EntityKind.PROJECT, {"name": "Launch"})
        assert project.status == "active"

    def test_name_required(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            validate_create(EntityKind.PROJECT, {"description": "no name"})
        assert exc_info.value.field == "name"


class TestMeetingCreate:
    def test_title_and_start_required(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            validate_create(EntityKind.MEETING, {"title": "Sync"})
        assert exc_info.value.field == "startTime"

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            validate_create(
                EntityKind.MEETING,
                {
                    "title": "Sync",
                    "startTime": "2026-10-14T10:00:00Z",
                    "endTime": "2026-10-14T09:00:00Z",
                },
            )
        assert exc_info.value.field == "endTime"

    def test_omitted_and_empty_participants_differ(self):
        omitted = validate_create(EntityKind.MEETING, {"title": "Sync", "startTime": NOW.isoformat()})
        empty = validate_create(
            EntityKind.MEETING,
            {"title": "Sync", "startTime": NOW.isoformat(), "participantIds": []},
        )
        assert omitted.participant_ids is None
        assert empty.participant_ids == []


class TestMeetingWindow:
    def test_open_ended_meeting_allowed(self):
        check_meeting_window(NOW, None)

    def test_zero_length_meeting_allowed(self):
        check_meeting_window(NOW, NOW)

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidPayloadError) as exc_info:
            check_meeting_window(NOW, NOW - timedelta(minutes=1))
        assert exc_info.value.field == "end_time"

    def test_update_drops_null_start(self):
        update = MeetingUpdate.model_validate({"startTime": None, "notes": "n"})
        assert update.changes() == {"notes": "n"}
