"""Request dependencies shared by the API routers"""

from fastapi import Request

from clipcast.config import ClipCastConfig
from clipcast.service import ScheduleService


def get_app_config(request: Request) -> ClipCastConfig:
    """Configuration the application was created with."""
    return request.app.state.config


def get_schedule_service(request: Request) -> ScheduleService:
    """Schedule service bound to the application's store."""
    return request.app.state.schedule_service
