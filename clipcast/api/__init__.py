"""API routes for ClipCast"""

from fastapi import APIRouter

from .health import router as health_router
from .schedule import router as schedule_router

# Routes are mounted at the root: /schedule, /_task/export, /health
api_router = APIRouter()
api_router.include_router(schedule_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
