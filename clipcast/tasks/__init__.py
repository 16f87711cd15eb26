"""
ClipCast Background Tasks

- TaskScheduler: interval scheduler that never overlaps a task with itself
- export_schedule_task: daily timeline generation
"""

from clipcast.tasks.schedule_tasks import TASK_NAME, export_schedule_task
from clipcast.tasks.scheduler import ScheduledTask, TaskScheduler

__all__ = [
    "TASK_NAME",
    "ScheduledTask",
    "TaskScheduler",
    "export_schedule_task",
]
