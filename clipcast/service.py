"""
Schedule service.

The two operations exposed to the outside world:
- generate_next_day: build and persist tomorrow's timeline (and today's if
  it is missing). Safe to call repeatedly.
- query_window: merge today and tomorrow and slice out a window.
"""

import logging
import random
from datetime import datetime, timedelta
from threading import Lock
from typing import Callable, Optional

from clipcast.config import SamplerConfig, TimelineConfig
from clipcast.errors import NotFoundError
from clipcast.scheduling.builder import TimelineBuilder
from clipcast.scheduling.codec import decode_timeline, encode_timeline
from clipcast.scheduling.sampler import CorpusSampler
from clipcast.scheduling.timeline import Timeline, schedule_key, start_of_day
from clipcast.store.base import DocumentStore

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(hours=24)


class ScheduleService:
    """Reads and writes per-day timelines through a document store."""

    def __init__(
        self,
        store: DocumentStore,
        timeline_settings: Optional[TimelineConfig] = None,
        sampler_settings: Optional[SamplerConfig] = None,
        rng_factory: Optional[Callable[[], random.Random]] = None,
    ):
        self.store = store
        self.timeline_settings = timeline_settings or TimelineConfig()
        self.sampler_settings = sampler_settings or SamplerConfig()
        self.rng_factory = rng_factory or random.Random
        self.tz = self.timeline_settings.tzinfo
        # Held by whoever is exporting; export triggers never wait on it
        self.export_lock = Lock()

    def today(self, now: Optional[datetime] = None) -> datetime:
        """Midnight of the current day in the reference timezone."""
        return start_of_day(now or datetime.now(self.tz), self.tz)

    def key_for(self, day: datetime) -> str:
        return schedule_key(day, self.tz)

    def get_timeline(self, day: datetime) -> Timeline:
        """
        Load the timeline for the day containing `day`.

        Raises:
            NotFoundError: No timeline has been generated for that day.
        """
        key = self.key_for(day)
        document = self.store.get_document(key)
        if document is None:
            raise NotFoundError("timeline does not exist", key=key)
        return decode_timeline(document, self.timeline_settings.channel_count)

    def has_timeline(self, day: datetime) -> bool:
        return self.store.get_document(self.key_for(day)) is not None

    def save_timeline(self, day: datetime, timeline: Timeline) -> None:
        key = self.key_for(day)
        self.store.set_document(key, encode_timeline(timeline))
        logger.info(f"export schedule: {key} ({timeline.item_count} items)")

    def generate_next_day(self, today: datetime) -> Optional[Timeline]:
        """
        Build and persist tomorrow's timeline.

        Does nothing if tomorrow already exists. If today's timeline is
        missing it is built first, starting at midnight, and persisted
        before tomorrow is built from it.

        Returns:
            Tomorrow's new timeline, or None when it already existed.

        Raises:
            StatsNotFoundError: The corpus is empty.
            ExhaustedError: Not enough unique clips could be loaded.
        """
        today = start_of_day(today, self.tz)
        tomorrow = start_of_day(today + ONE_DAY, self.tz)

        if self.has_timeline(tomorrow):
            logger.info(f"Timeline {self.key_for(tomorrow)} already exists, nothing to do")
            return None

        try:
            today_timeline: Optional[Timeline] = self.get_timeline(today)
        except NotFoundError:
            today_timeline = None

        sampler = CorpusSampler.from_store(
            self.store,
            rng=self.rng_factory(),
            settings=self.sampler_settings,
        )
        builder = TimelineBuilder(
            sampler,
            self.tz,
            channel_count=self.timeline_settings.channel_count,
            max_clip_duration=self.timeline_settings.max_clip_duration,
        )

        if today_timeline is None:
            today_timeline = builder.build_timeline(None, today)
            self.save_timeline(today, today_timeline)

        tomorrow_timeline = builder.build_timeline(today_timeline, tomorrow)
        self.save_timeline(tomorrow, tomorrow_timeline)
        logger.info(f"Sampler requested {sampler.total_requested} clip numbers this run")

        return tomorrow_timeline

    def query_window(
        self,
        now: datetime,
        window_length: Optional[timedelta] = None,
    ) -> Timeline:
        """
        Get the merged today+tomorrow timeline around `now`.

        Raises:
            NotFoundError: Today's timeline does not exist.
        """
        window_length = window_length or self.timeline_settings.window
        today = self.today(now)

        timeline = self.get_timeline(today)
        try:
            timeline = timeline.merge(self.get_timeline(today + ONE_DAY))
        except NotFoundError:
            logger.debug(f"No timeline for {self.key_for(today + ONE_DAY)} yet")

        return timeline.slice(now, window_length)
