from fastapi import APIRouter

from planboard.api.routers.assignment_groups import router as assignment_groups_router
from planboard.api.routers.assignments import router as assignments_router
from planboard.api.routers.day_assignments import router as day_assignments_router
from planboard.api.routers.day_offs import router as day_offs_router
from planboard.api.routers.milestones import router as milestones_router
from planboard.api.routers.settings import router as settings_router
from planboard.api.routers.timeline import router as timeline_router


api_router = APIRouter()
# The day and group routes sit under /assignments and must be matched before /assignments/{id}.
api_router.include_router(day_assignments_router, prefix="/assignments/days", tags=["day-assignments"])
api_router.include_router(assignment_groups_router, prefix="/assignments/groups", tags=["assignment-groups"])
api_router.include_router(timeline_router, prefix="/assignments", tags=["timeline"])
api_router.include_router(assignments_router, prefix="/assignments", tags=["assignments"])
api_router.include_router(milestones_router, prefix="/milestones", tags=["milestones"])
api_router.include_router(day_offs_router, prefix="/day-offs", tags=["day-offs"])
api_router.include_router(settings_router, prefix="/settings", tags=["settings"])
