"""Schedule API endpoints: the read path and the daily export trigger"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, status

from clipcast.api.deps import get_app_config, get_schedule_service
from clipcast.config import ClipCastConfig
from clipcast.errors import ClipCastError, NotFoundError
from clipcast.scheduling.codec import timeline_to_dict
from clipcast.service import ScheduleService
from clipcast.tasks.schedule_tasks import export_schedule_task

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Schedule"])


@router.get("/schedule")
def get_schedule(
    service: ScheduleService = Depends(get_schedule_service),
) -> dict[str, Any]:
    """Get what plays on every channel from now until the end of the window.

    Returns:
        Channels with their items, today and tomorrow merged
    """
    now = datetime.now(service.tz)
    try:
        timeline = service.query_window(now)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.to_dict())

    return timeline_to_dict(timeline)


@router.get("/_task/export")
def export_schedule(
    service: ScheduleService = Depends(get_schedule_service),
    config: ClipCastConfig = Depends(get_app_config),
    x_appengine_cron: str | None = Header(default=None),
) -> dict[str, Any]:
    """Run the daily export job.

    Only cron requests are accepted unless the server runs in develop mode.
    Answers 409 while another export is in progress.

    Returns:
        Export statistics
    """
    if not config.server.develop and x_appengine_cron != "true":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request")

    try:
        stats = export_schedule_task(service)
    except ClipCastError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.to_dict(),
        )

    if stats["running"]:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=stats)
    return stats
