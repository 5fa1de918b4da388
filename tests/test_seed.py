"""Tests for the demo workspace seed script."""

from datetime import datetime, timezone

from sqlalchemy import func, select

from commandcenter.models.meeting import Meeting
from commandcenter.models.project import Project, Task, TaskStatus
from commandcenter.models.summary import WeeklySummary
from commandcenter.models.user import User
from commandcenter.models.workspace import WorkspaceRole
from commandcenter.scripts.seed_demo_workspace import seed_demo_workspace
from commandcenter.services.membership import resolve_workspace

NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


async def count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar()


async def test_seeds_demo_workspace(db):
    workspace = await seed_demo_workspace(db, now=NOW)

    assert workspace.slug == "alex-startup"
    assert await count(db, Project) == 3
    assert await count(db, Task) == 12
    assert await count(db, Meeting) == 3
    assert await count(db, WeeklySummary) == 1

    done = (await db.execute(select(Task).where(Task.status == TaskStatus.DONE))).scalars().all()
    assert all(t.completed_at is not None for t in done)

    follow_up = (
        await db.execute(select(Task).where(Task.title == "Document Q1 roadmap"))
    ).scalar_one()
    meeting = await db.get(Meeting, follow_up.meeting_id)
    assert meeting.title == "Product Roadmap Planning"


async def test_founder_owns_workspace(db):
    workspace = await seed_demo_workspace(db, now=NOW)

    founder = (await db.execute(select(User).where(User.email == "founder@example.com"))).scalar_one()
    membership = await resolve_workspace(db, founder.id)
    assert membership.workspace_id == workspace.id
    assert membership.role is WorkspaceRole.OWNER


async def test_is_idempotent(db):
    first = await seed_demo_workspace(db, now=NOW)
    second = await seed_demo_workspace(db, now=NOW)

    assert second.id == first.id
    assert await count(db, Project) == 3
