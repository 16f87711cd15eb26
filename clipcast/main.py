"""
ClipCast Main Application

FastAPI application entry point: schedule queries and the daily export task.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from clipcast import __version__
from clipcast.config import ClipCastConfig, load_config
from clipcast.service import ScheduleService
from clipcast.store import DocumentStore, create_store
from clipcast.tasks import TASK_NAME, TaskScheduler, export_schedule_task

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Starts the background export task when enabled and releases the store
    on shutdown.
    """
    config: ClipCastConfig = app.state.config
    logger.info(f"Starting ClipCast v{__version__}")

    scheduler: Optional[TaskScheduler] = None
    if config.tasks.enabled:
        scheduler = TaskScheduler()
        scheduler.add_task(
            TASK_NAME,
            export_schedule_task,
            config.tasks.interval_seconds,
            config.tasks.run_immediately,
            app.state.schedule_service,
        )
        await scheduler.start()
    app.state.task_scheduler = scheduler

    yield

    if scheduler is not None:
        await scheduler.stop()
    app.state.store.close()
    logger.info("ClipCast stopped")


def create_app(
    config: Optional[ClipCastConfig] = None,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration; loaded from config.yaml and the environment if omitted.
        store: Document store; created from `config.store` if omitted.

    Returns:
        Configured application
    """
    config = config or load_config()
    if store is None:
        store = create_store(config.store)

    app = FastAPI(
        title="ClipCast",
        description="Virtual multi-channel clip broadcast scheduler",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.store = store
    app.state.schedule_service = ScheduleService(
        store,
        timeline_settings=config.timeline,
        sampler_settings=config.sampler,
    )

    from clipcast.api import api_router
    app.include_router(api_router)

    return app


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn
    from clipcast.utils.logging_setup import parse_size, setup_logging

    config = load_config()

    setup_logging(
        log_level=config.logging.level,
        log_file_name=config.logging.file,
        log_to_console=config.logging.to_console,
        log_to_file=config.logging.to_file,
        max_bytes=parse_size(config.logging.max_size),
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
