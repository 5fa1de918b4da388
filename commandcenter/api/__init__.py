"""API router package."""

from fastapi import APIRouter

from commandcenter.api.v1 import (
    auth,
    dashboard,
    health,
    meetings,
    projects,
    summaries,
    tasks,
    workspaces,
)

router = APIRouter()

# Include all API routers
router.include_router(health.router, tags=["Health"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(workspaces.router, prefix="/workspaces", tags=["Workspaces"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(meetings.router, prefix="/meetings", tags=["Meetings"])
router.include_router(summaries.router, prefix="/summaries", tags=["Summaries"])
