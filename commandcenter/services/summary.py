"""Weekly summary generation.

Summaries are an append-only log: generating again for the same week adds a
new row, and the newest row by generated_at is the current one.
"""

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commandcenter.config import Settings, get_settings
from commandcenter.models.meeting import Meeting
from commandcenter.models.project import Task, TaskStatus
from commandcenter.models.summary import WeeklySummary
from commandcenter.services.aggregation import PRIORITY_ORDER
from commandcenter.utils.calendar import as_utc, end_of_week, get_zone, start_of_week

logger = structlog.get_logger()

TOP_PRIORITY_COUNT = 3


def compose_summary_text(
    tasks_completed: int,
    tasks_created: int,
    meetings_held: int,
    top_priorities: list[str],
) -> str:
    """Plain-text rollup sentence for a week."""
    def plural(count: int, noun: str) -> str:
        return f"{count} {noun}" if count == 1 else f"{count} {noun}s"

    text = (
        f"This week: {plural(tasks_completed, 'task')} completed, "
        f"{plural(tasks_created, 'task')} created, "
        f"{plural(meetings_held, 'meeting')} held."
    )
    if top_priorities:
        text += " Focus next: " + "; ".join(top_priorities) + "."
    return text


class WeeklySummaryService:
    """Computes and stores weekly summaries for a workspace."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.tz = get_zone(self.settings.timezone)

    async def list_summaries(self, workspace_id: UUID, limit: int = 20) -> list[WeeklySummary]:
        result = await self.db.execute(
            select(WeeklySummary)
            .where(WeeklySummary.workspace_id == workspace_id)
            .order_by(WeeklySummary.generated_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def generate(self, workspace_id: UUID, now: datetime) -> WeeklySummary:
        """Compute the current week's rollup and append it."""
        now = as_utc(now)
        week_start = start_of_week(now, self.tz, self.settings.week_starts_on)
        week_end = end_of_week(now, self.tz, self.settings.week_starts_on)

        completed_result = await self.db.execute(
            select(func.count(Task.id)).where(
                Task.workspace_id == workspace_id,
                Task.completed_at >= week_start,
                Task.completed_at <= week_end,
            )
        )
        tasks_completed = completed_result.scalar() or 0

        created_result = await self.db.execute(
            select(func.count(Task.id)).where(
                Task.workspace_id == workspace_id,
                Task.created_at >= week_start,
                Task.created_at <= week_end,
            )
        )
        tasks_created = created_result.scalar() or 0

        held_result = await self.db.execute(
            select(func.count(Meeting.id)).where(
                Meeting.workspace_id == workspace_id,
                Meeting.start_time >= week_start,
                Meeting.start_time < min(now, week_end),
            )
        )
        meetings_held = held_result.scalar() or 0

        priorities_result = await self.db.execute(
            select(Task.title)
            .where(Task.workspace_id == workspace_id, Task.status != TaskStatus.DONE)
            .order_by(PRIORITY_ORDER.desc(), Task.due_date.asc().nulls_last(), Task.id)
            .limit(TOP_PRIORITY_COUNT)
        )
        top_priorities = [row[0] for row in priorities_result.all()]

        summary = WeeklySummary(
            workspace_id=workspace_id,
            week_start_date=week_start,
            week_end_date=week_end,
            summary=compose_summary_text(
                tasks_completed, tasks_created, meetings_held, top_priorities
            ),
            tasks_completed=tasks_completed,
            tasks_created=tasks_created,
            meetings_held=meetings_held,
            top_priorities=top_priorities,
            generated_at=now,
        )
        self.db.add(summary)
        await self.db.commit()
        await self.db.refresh(summary)

        logger.info(
            "Weekly summary generated",
            workspace_id=str(workspace_id),
            week_start=week_start.isoformat(),
            tasks_completed=tasks_completed,
            meetings_held=meetings_held,
        )

        return summary
