"""
Schedule Background Tasks.

The daily export job: make sure tomorrow's timeline exists.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from clipcast.errors import ClipCastError
from clipcast.service import ScheduleService
from clipcast.utils.logging_setup import log_exception

logger = logging.getLogger(__name__)

TASK_NAME = "schedule_export"


def export_schedule_task(
    service: ScheduleService,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Generate tomorrow's timeline if it is missing.

    At most one export runs per service. A call made while another export
    is in progress returns immediately with `running` set.

    Errors are logged and re-raised so the caller can report the failed
    run; the next run resumes from whatever was persisted.

    Returns:
        Statistics about the export
    """
    today = service.today(now)

    if not service.export_lock.acquire(blocking=False):
        logger.warning(f"export task already running, skipped: {today.date()}")
        return {
            "today": today.date().isoformat(),
            "generated": False,
            "items": 0,
            "running": True,
        }

    try:
        logger.info(f"export task start: {today.date()}")
        try:
            timeline = service.generate_next_day(today)
        except ClipCastError as e:
            logger.error(f"Can't export schedule ({e.kind.value}): {e.message} {e.context}")
            raise
        except Exception as e:
            log_exception(logger, e, "Can't export schedule")
            raise
    finally:
        service.export_lock.release()

    stats = {
        "today": today.date().isoformat(),
        "generated": timeline is not None,
        "items": timeline.item_count if timeline else 0,
        "running": False,
    }
    logger.info(f"export task done: {stats}")
    return stats
