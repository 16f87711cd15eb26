"""
Timeline builder.

Fills every channel of a day with clips drawn from the corpus sampler:
- No clip repeats within one channel on the same day
- A clip playing on an earlier channel at the slot start is not reused
- Clips at or above the maximum duration are skipped
- The last clip of a day may run past midnight into the next day
"""

import logging
from datetime import datetime, timedelta, tzinfo
from typing import List, Optional, Set

from clipcast.errors import NotFoundError
from clipcast.scheduling.sampler import CorpusSampler
from clipcast.scheduling.state import ClipRecord
from clipcast.scheduling.timeline import Channel, Timeline, TimelineItem, start_of_day

logger = logging.getLogger(__name__)


class TimelineBuilder:
    """Builds one day of programming for all channels."""

    def __init__(
        self,
        sampler: CorpusSampler,
        tz: tzinfo,
        channel_count: int = 4,
        max_clip_duration: timedelta = timedelta(minutes=30),
    ):
        self.sampler = sampler
        self.tz = tz
        self.channel_count = channel_count
        self.max_clip_duration = max_clip_duration

    def build_channel(
        self,
        start_time: datetime,
        same_day_channels: List[Channel],
    ) -> Channel:
        """
        Fill one channel from `start_time` until the end of its day.

        Args:
            start_time: When the first clip starts.
            same_day_channels: Channels already built for the same day.

        Returns:
            The finished channel. Its last item may end after midnight.
        """
        day_end = start_of_day(start_time, self.tz) + timedelta(hours=24)
        current_time = start_time
        items: List[TimelineItem] = []
        placed: Set[str] = set()

        while current_time < day_end:
            exclude = set(placed)
            for other in same_day_channels:
                try:
                    exclude.add(other.clip_at(current_time).clip_id)
                except NotFoundError:
                    continue

            clip = self._draw_short_clip(exclude)
            items.append(
                TimelineItem(
                    start_time=current_time,
                    duration=clip.duration,
                    clip_id=clip.id,
                )
            )
            placed.add(clip.id)
            current_time += clip.duration

        return Channel(items=items)

    def build_timeline(
        self,
        previous: Optional[Timeline],
        target_day: datetime,
    ) -> Timeline:
        """
        Build all channels for `target_day`.

        Each channel continues from where the previous day's channel ended
        if that clip runs past midnight, otherwise it starts at midnight.
        Channels are built in order because each one excludes clips playing
        on the channels built before it.
        """
        day_start = start_of_day(target_day, self.tz)
        logger.info(f"Building timeline for {day_start.date()} ({self.channel_count} channels)")

        channels: List[Channel] = []
        for i in range(self.channel_count):
            start_time = self._channel_start(previous, i, day_start)
            channel = self.build_channel(start_time, channels)
            channels.append(channel)
            logger.debug(
                f"Channel {i}: {len(channel.items)} items, "
                f"{start_time.isoformat()} -> {channel.finish_time().isoformat()}"
            )

        return Timeline(channels=channels)

    def _draw_short_clip(self, exclude: Set[str]) -> ClipRecord:
        """Draw clips until one is shorter than the maximum duration."""
        rejected = set(exclude)
        while True:
            clip = self.sampler.draw(rejected)
            if clip.duration < self.max_clip_duration:
                return clip
            rejected.add(clip.id)

    @staticmethod
    def _channel_start(previous: Optional[Timeline], index: int, day_start: datetime) -> datetime:
        if previous is None:
            return day_start

        channel = previous.channel(index)
        if channel is None:
            return day_start

        finish = channel.finish_time()
        if finish > day_start:
            return finish
        return day_start
