"""Health check API endpoint for ClipCast"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from clipcast import __version__
from clipcast.api.deps import get_schedule_service
from clipcast.errors import ClipCastError
from clipcast.service import ONE_DAY, ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check() -> dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Basic health status
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/schedule")
def schedule_health(
    service: ScheduleService = Depends(get_schedule_service),
) -> dict[str, Any]:
    """
    Report which timelines and corpus statistics exist.

    Returns:
        dict: "healthy" when tomorrow is already scheduled, "degraded" otherwise
    """
    today = service.today()
    try:
        corpus_size = service.store.get_stats().count
    except ClipCastError as e:
        logger.warning(f"Corpus statistics unavailable: {e}")
        corpus_size = None

    has_today = service.has_timeline(today)
    has_tomorrow = service.has_timeline(today + ONE_DAY)

    return {
        "status": "healthy" if has_today and has_tomorrow else "degraded",
        "corpus_size": corpus_size,
        "today": has_today,
        "tomorrow": has_tomorrow,
    }
