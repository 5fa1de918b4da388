"""Seed script to create the demo founder workspace.

Creates a founder account with one workspace holding three projects, a
spread of tasks across every status, three meetings (one with a follow-up
task) and a weekly summary, so the dashboard has something to show.

Usage:
    python -m commandcenter.scripts.seed_demo_workspace

Running it again is a no-op once the workspace slug exists.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.config import get_settings
from commandcenter.db.session import async_session_factory
from commandcenter.models.meeting import Meeting, MeetingParticipant, ParticipantRole
from commandcenter.models.project import Project, Task, TaskPriority, TaskStatus
from commandcenter.models.summary import WeeklySummary
from commandcenter.models.user import User
from commandcenter.models.workspace import Workspace, WorkspaceRole, WorkspaceUser
from commandcenter.utils.calendar import end_of_week, get_zone, start_of_week

DEMO_USER = {"email": "founder@example.com", "name": "Alex Founder"}
DEMO_WORKSPACE = {"name": "Alex's Startup", "slug": "alex-startup"}

# Task offsets are in days relative to the seed time
DEMO_PROJECTS = [
    {
        "name": "Fundraise Series A",
        "description": "Raise $5M Series A to scale product and team",
        "color": "#3b82f6",
        "tasks": [
            ("Update pitch deck", "Refresh slides with latest metrics and traction",
             TaskPriority.URGENT, TaskStatus.IN_PROGRESS, 2, None),
            ("Reach out to 10 VCs", "Send personalized intro emails to target investors",
             TaskPriority.HIGH, TaskStatus.TODO, 5, None),
            ("Prepare financial model", "3-year projections with unit economics",
             TaskPriority.HIGH, TaskStatus.BACKLOG, 7, None),
            ("Schedule partner meetings", "Book meetings with interested VCs",
             TaskPriority.MEDIUM, TaskStatus.TODO, 10, None),
        ],
    },
    {
        "name": "Product Launch v2.0",
        "description": "Ship major product update with new features",
        "color": "#10b981",
        "tasks": [
            ("Design new dashboard UI", "Redesign main dashboard with better UX",
             TaskPriority.HIGH, TaskStatus.IN_PROGRESS, 3, None),
            ("Implement real-time notifications", "Add WebSocket support for live updates",
             TaskPriority.MEDIUM, TaskStatus.TODO, 14, None),
            ("User testing round 2", "Run usability tests with 10 beta users",
             TaskPriority.HIGH, TaskStatus.BACKLOG, 21, None),
            ("Fix critical bugs", "Address top 5 bugs from user feedback",
             TaskPriority.URGENT, TaskStatus.DONE, -2, -1),
        ],
    },
    {
        "name": "Q1 Hiring",
        "description": "Hire 3 engineers and 1 designer",
        "color": "#f59e0b",
        "tasks": [
            ("Post job listings", "Publish roles on LinkedIn, AngelList, and HN",
             TaskPriority.HIGH, TaskStatus.DONE, -5, -4),
            ("Screen candidates", "Review applications and shortlist top 20",
             TaskPriority.HIGH, TaskStatus.IN_PROGRESS, 1, None),
            ("Schedule interviews", "Book technical interviews with shortlisted candidates",
             TaskPriority.MEDIUM, TaskStatus.TODO, 7, None),
        ],
    },
]

DEMO_MEETINGS = [
    {
        "title": "Investor Call - Acme Ventures",
        "description": "Initial pitch call with partner",
        "offset_days": 3,
        "notes": None,
    },
    {
        "title": "Product Roadmap Planning",
        "description": "Q1 feature prioritization session",
        "offset_days": 1,
        "notes": (
            "Discussed top priorities for Q1. Focus on: 1) Dashboard redesign, "
            "2) Real-time features, 3) Mobile app."
        ),
        "follow_up": {
            "title": "Document Q1 roadmap",
            "description": "Write up roadmap doc based on planning meeting",
            "offset_days": 2,
        },
    },
    {
        "title": "Team Standup",
        "description": "Weekly team sync",
        "offset_days": -2,
        "notes": (
            "Discussed progress on v2.0 launch. All on track. "
            "Sarah finishing dashboard designs by EOW."
        ),
    },
]

DEMO_SUMMARY = {
    "summary": (
        "Great progress this week! Completed 3 critical tasks, held 2 productive meetings, "
        "and made significant headway on fundraising prep. Focus next week: finalize pitch "
        "deck and schedule VC meetings."
    ),
    "tasks_completed": 3,
    "tasks_created": 8,
    "meetings_held": 2,
    "top_priorities": [
        "Complete Series A pitch deck",
        "Ship dashboard redesign",
        "Screen hiring candidates",
    ],
}


async def get_or_create_user(db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.email == DEMO_USER["email"]))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(**DEMO_USER)
        db.add(user)
        await db.flush()
    print(f"  User: {user.email}")
    return user


async def seed_demo_workspace(db: AsyncSession, now: datetime | None = None) -> Workspace:
    """Create the demo workspace and its content. Returns the existing one if present."""
    now = now or datetime.now(timezone.utc)

    result = await db.execute(select(Workspace).where(Workspace.slug == DEMO_WORKSPACE["slug"]))
    existing = result.scalar_one_or_none()
    if existing is not None:
        print(f"Workspace '{existing.slug}' already exists, nothing to do.")
        return existing

    user = await get_or_create_user(db)

    workspace = Workspace(**DEMO_WORKSPACE)
    db.add(workspace)
    await db.flush()
    db.add(WorkspaceUser(user_id=user.id, workspace_id=workspace.id, role=WorkspaceRole.OWNER))
    print(f"  Workspace: {workspace.name}")

    task_count = 0
    for project_data in DEMO_PROJECTS:
        project = Project(
            workspace_id=workspace.id,
            name=project_data["name"],
            description=project_data["description"],
            color=project_data["color"],
            status="active",
        )
        db.add(project)
        await db.flush()

        for title, description, priority, status, due_in, completed_in in project_data["tasks"]:
            db.add(
                Task(
                    title=title,
                    description=description,
                    priority=priority,
                    status=status,
                    due_date=now + timedelta(days=due_in),
                    completed_at=now + timedelta(days=completed_in) if completed_in is not None else None,
                    workspace_id=workspace.id,
                    project_id=project.id,
                    owner_id=user.id,
                    created_by_id=user.id,
                )
            )
            task_count += 1
    print(f"  Created {len(DEMO_PROJECTS)} projects with {task_count} tasks")

    for meeting_data in DEMO_MEETINGS:
        start = now + timedelta(days=meeting_data["offset_days"])
        meeting = Meeting(
            workspace_id=workspace.id,
            title=meeting_data["title"],
            description=meeting_data["description"],
            start_time=start,
            end_time=start,
            notes=meeting_data["notes"],
            participants=[MeetingParticipant(user_id=user.id, role=ParticipantRole.ORGANIZER)],
        )
        db.add(meeting)

        follow_up = meeting_data.get("follow_up")
        if follow_up:
            await db.flush()
            db.add(
                Task(
                    title=follow_up["title"],
                    description=follow_up["description"],
                    priority=TaskPriority.MEDIUM,
                    status=TaskStatus.TODO,
                    due_date=now + timedelta(days=follow_up["offset_days"]),
                    workspace_id=workspace.id,
                    owner_id=user.id,
                    created_by_id=user.id,
                    meeting_id=meeting.id,
                )
            )
    print(f"  Created {len(DEMO_MEETINGS)} meetings")

    settings = get_settings()
    tz = get_zone(settings.timezone)
    db.add(
        WeeklySummary(
            workspace_id=workspace.id,
            week_start_date=start_of_week(now, tz, settings.week_starts_on),
            week_end_date=end_of_week(now, tz, settings.week_starts_on),
            generated_at=now,
            **DEMO_SUMMARY,
        )
    )
    print("  Created weekly summary")

    await db.commit()
    return workspace


async def main() -> None:
    """Main entry point."""
    print("Seeding demo workspace...")
    print("-" * 50)

    async with async_session_factory() as db:
        try:
            workspace = await seed_demo_workspace(db)
        except Exception as e:
            print(f"Error seeding demo workspace: {e}")
            await db.rollback()
            raise

    print("\nDemo workspace seeded successfully!")
    print(f"Workspace ID: {workspace.id}")
    print(f"Sign in as: {DEMO_USER['email']}")


if __name__ == "__main__":
    asyncio.run(main())
