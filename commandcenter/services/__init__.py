"""Services package."""

from commandcenter.services.aggregation import AggregationService
from commandcenter.services.meetings import MeetingService
from commandcenter.services.membership import Caller, resolve_workspace
from commandcenter.services.projects import ProjectService
from commandcenter.services.summary import WeeklySummaryService
from commandcenter.services.tasks import TaskService

__all__ = [
    "AggregationService",
    "Caller",
    "MeetingService",
    "ProjectService",
    "TaskService",
    "WeeklySummaryService",
    "resolve_workspace",
]
