"""Tests for weekly summary generation."""

from datetime import datetime, timedelta, timezone

from commandcenter.models.meeting import Meeting
from commandcenter.models.project import Task, TaskPriority, TaskStatus
from commandcenter.services.summary import WeeklySummaryService, compose_summary_text

NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)
WEEK_START = datetime(2026, 10, 11, tzinfo=timezone.utc)

SUMMARIES = "/api/v1/summaries/"


class TestComposeSummaryText:
    def test_singular_and_plural(self):
        text = compose_summary_text(1, 2, 0, [])
        assert text == "This week: 1 task completed, 2 tasks created, 0 meetings held."

    def test_lists_priorities(self):
        text = compose_summary_text(0, 0, 1, ["Pitch deck", "Hiring"])
        assert text.endswith("Focus next: Pitch deck; Hiring.")


class TestGenerate:
    async def test_counts_current_week(self, db, alice, bob):
        ws = alice.workspace.id
        db.add_all(
            [
                Task(workspace_id=ws, title="done this week", status=TaskStatus.DONE,
                     completed_at=WEEK_START + timedelta(days=1), created_at=WEEK_START - timedelta(days=10)),
                Task(workspace_id=ws, title="done last week", status=TaskStatus.DONE,
                     completed_at=WEEK_START - timedelta(days=1), created_at=WEEK_START - timedelta(days=10)),
                Task(workspace_id=ws, title="Pitch deck", priority=TaskPriority.URGENT,
                     created_at=WEEK_START + timedelta(days=2)),
                Task(workspace_id=ws, title="Hiring", priority=TaskPriority.HIGH,
                     created_at=WEEK_START + timedelta(days=2)),
                Task(workspace_id=ws, title="Roadmap", priority=TaskPriority.MEDIUM,
                     created_at=WEEK_START + timedelta(days=2)),
                Task(workspace_id=ws, title="Chores", priority=TaskPriority.LOW,
                     created_at=WEEK_START + timedelta(days=2)),
                Task(workspace_id=bob.workspace.id, title="not ours", priority=TaskPriority.URGENT),
                Meeting(workspace_id=ws, title="held", start_time=WEEK_START + timedelta(days=1)),
                Meeting(workspace_id=ws, title="later this week", start_time=NOW + timedelta(days=1)),
                Meeting(workspace_id=ws, title="last week", start_time=WEEK_START - timedelta(days=2)),
            ]
        )
        await db.commit()

        summary = await WeeklySummaryService(db).generate(ws, NOW)

        assert summary.tasks_completed == 1
        assert summary.tasks_created == 4
        assert summary.meetings_held == 1
        assert summary.top_priorities == ["Pitch deck", "Hiring", "Roadmap"]
        assert summary.week_start_date.replace(tzinfo=timezone.utc) == WEEK_START
        assert "1 task completed" in summary.summary

    async def test_append_only(self, db, alice):
        service = WeeklySummaryService(db)
        first = await service.generate(alice.workspace.id, NOW)
        second = await service.generate(alice.workspace.id, NOW + timedelta(hours=1))

        summaries = await service.list_summaries(alice.workspace.id)
        assert [s.id for s in summaries] == [second.id, first.id]


class TestSummaryEndpoints:
    async def test_latest_missing_is_404(self, client, alice):
        response = await client.get(f"{SUMMARIES}latest", headers=alice.headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_generate_then_latest(self, client, alice):
        await client.post("/api/v1/tasks/", json={"title": "Ship", "priority": "URGENT"}, headers=alice.headers)

        generated = await client.post(f"{SUMMARIES}generate", headers=alice.headers)
        assert generated.status_code == 201
        assert generated.json()["top_priorities"] == ["Ship"]
        assert generated.json()["tasks_created"] == 1

        latest = await client.get(f"{SUMMARIES}latest", headers=alice.headers)
        assert latest.json()["id"] == generated.json()["id"]

        listed = await client.get(SUMMARIES, headers=alice.headers)
        assert [s["id"] for s in listed.json()] == [generated.json()["id"]]

    async def test_scoped_to_workspace(self, client, alice, bob):
        await client.post(f"{SUMMARIES}generate", headers=alice.headers)

        response = await client.get(f"{SUMMARIES}latest", headers=bob.headers)
        assert response.status_code == 404
