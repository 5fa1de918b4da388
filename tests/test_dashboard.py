"""Tests for the dashboard view and its API endpoint."""

from datetime import datetime, timedelta, timezone

from commandcenter.models.meeting import Meeting
from commandcenter.models.project import Task, TaskPriority, TaskStatus
from commandcenter.models.summary import WeeklySummary
from commandcenter.services.aggregation import AggregationService

# Wednesday; the week runs Sunday 2026-10-11 to Saturday 2026-10-17
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)
TODAY = datetime(2026, 10, 14, tzinfo=timezone.utc)


def add_task(db, account, title, **fields):
    task = Task(workspace_id=account.workspace.id, title=title, **fields)
    db.add(task)
    return task


class TestDashboardView:
    async def test_today_and_upcoming(self, db, alice):
        add_task(db, alice, "A", priority=TaskPriority.URGENT, due_date=TODAY + timedelta(hours=9))
        add_task(db, alice, "B", priority=TaskPriority.LOW, due_date=TODAY + timedelta(days=1, hours=10))
        add_task(
            db,
            alice,
            "C",
            status=TaskStatus.IN_PROGRESS,
            due_date=TODAY + timedelta(days=5),
        )
        await db.commit()

        view = await AggregationService(db).dashboard(alice.workspace.id, NOW)

        assert [t.title for t in view.today_tasks] == ["A", "C"]
        assert [t.title for t in view.upcoming_tasks] == ["C", "B"]

    async def test_done_tasks_never_upcoming(self, db, alice):
        add_task(db, alice, "shipped", status=TaskStatus.DONE, due_date=TODAY + timedelta(days=2))
        await db.commit()

        view = await AggregationService(db).dashboard(alice.workspace.id, NOW)
        assert view.upcoming_tasks == []

    async def test_stats(self, db, alice, bob):
        add_task(db, alice, "done", status=TaskStatus.DONE, due_date=TODAY - timedelta(days=3))
        add_task(db, alice, "overdue", due_date=TODAY - timedelta(days=1))
        add_task(db, alice, "wip", status=TaskStatus.IN_PROGRESS)
        add_task(db, alice, "due today", due_date=TODAY + timedelta(hours=1))
        add_task(db, bob, "someone else's", due_date=TODAY - timedelta(days=9))
        await db.commit()

        stats = (await AggregationService(db).dashboard(alice.workspace.id, NOW)).stats

        assert stats.total_tasks == 4
        assert stats.completed_tasks == 1
        assert stats.in_progress_tasks == 1
        assert stats.overdue_tasks == 1

    async def test_limits_and_priority_order(self, db, alice):
        priorities = [TaskPriority.LOW, TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.URGENT]
        for i in range(12):
            add_task(
                db,
                alice,
                f"t{i}",
                priority=priorities[i % 4],
                status=TaskStatus.IN_PROGRESS,
                due_date=TODAY + timedelta(days=i + 1),
            )
        await db.commit()

        view = await AggregationService(db).dashboard(alice.workspace.id, NOW)

        assert len(view.today_tasks) == 10
        ranks = [t.priority.rank for t in view.today_tasks]
        assert ranks == sorted(ranks, reverse=True)
        # Within equal priority the earlier due date comes first
        urgent = [t.title for t in view.today_tasks if t.priority is TaskPriority.URGENT]
        assert urgent == ["t3", "t7", "t11"]

    async def test_meetings_this_week(self, db, alice):
        for title, start in [
            ("last saturday", datetime(2026, 10, 10, 23, 0, tzinfo=timezone.utc)),
            ("friday", datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)),
            ("monday", datetime(2026, 10, 12, 9, 0, tzinfo=timezone.utc)),
            ("next sunday", datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)),
        ]:
            db.add(Meeting(workspace_id=alice.workspace.id, title=title, start_time=start))
        await db.commit()

        view = await AggregationService(db).dashboard(alice.workspace.id, NOW)
        assert [m.title for m in view.meetings] == ["monday", "friday"]

    async def test_latest_summary(self, db, alice):
        assert (await AggregationService(db).dashboard(alice.workspace.id, NOW)).latest_summary is None

        for summary, generated in [("older", NOW - timedelta(days=7)), ("newer", NOW)]:
            db.add(
                WeeklySummary(
                    workspace_id=alice.workspace.id,
                    week_start_date=TODAY,
                    week_end_date=TODAY,
                    summary=summary,
                    generated_at=generated,
                )
            )
        await db.commit()

        view = await AggregationService(db).dashboard(alice.workspace.id, NOW)
        assert view.latest_summary.summary == "newer"


class TestDashboardEndpoint:
    async def test_requires_workspace(self, client, drifter):
        response = await client.get("/api/v1/dashboard/", headers=drifter.headers)
        assert response.status_code == 404

    async def test_shape(self, client, alice):
        await client.post("/api/v1/tasks/", json={"title": "wip", "status": "IN_PROGRESS"}, headers=alice.headers)

        response = await client.get("/api/v1/dashboard/", headers=alice.headers)

        assert response.status_code == 200
        data = response.json()
        assert [t["title"] for t in data["today_tasks"]] == ["wip"]
        assert data["upcoming_tasks"] == []
        assert data["latest_summary"] is None
        assert data["stats"] == {
            "total_tasks": 1,
            "completed_tasks": 0,
            "in_progress_tasks": 1,
            "overdue_tasks": 0,
        }
