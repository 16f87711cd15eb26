"""
Timeline data types and queries.

A Timeline holds one calendar day of programming for every channel. Items
inside a channel are contiguous and ordered by start time, which lets the
queries below stop scanning early.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import List, Optional

from clipcast.errors import NotFoundError

# Finish time of a channel that has no items
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def start_of_day(t: datetime, tz: tzinfo) -> datetime:
    """Midnight of the calendar day containing `t` in the given timezone."""
    local = t.astimezone(tz)
    return datetime(local.year, local.month, local.day, tzinfo=tz)


def schedule_key(day: datetime, tz: tzinfo) -> str:
    """Document key of the timeline for the day containing `day`."""
    return f"Schedule/{start_of_day(day, tz).strftime('%Y-%m-%d')}"


@dataclass(frozen=True)
class TimelineItem:
    """One clip scheduled on a channel."""

    start_time: datetime
    duration: timedelta
    clip_id: str

    @property
    def end_time(self) -> datetime:
        return self.start_time + self.duration

    def contains(self, t: datetime) -> bool:
        """Check whether the clip is playing at `t`."""
        return self.start_time <= t < self.end_time


@dataclass
class Channel:
    """An ordered, contiguous run of timeline items."""

    items: List[TimelineItem] = field(default_factory=list)

    def finish_time(self) -> datetime:
        """End of the last item, or ZERO_TIME for an empty channel."""
        if not self.items:
            return ZERO_TIME
        return self.items[-1].end_time

    def clip_at(self, t: datetime) -> TimelineItem:
        """
        Get the item playing at a specific time.

        Raises:
            NotFoundError: Nothing is scheduled at `t`.
        """
        for item in self.items:
            if item.start_time > t:
                break
            if item.contains(t):
                return item

        raise NotFoundError("no clip scheduled", at=t)

    def clip_ids(self) -> List[str]:
        return [item.clip_id for item in self.items]


@dataclass
class Timeline:
    """All channels for one calendar day."""

    channels: List[Channel] = field(default_factory=list)

    @classmethod
    def empty(cls, channel_count: int) -> "Timeline":
        """Create a timeline with no items."""
        return cls(channels=[Channel() for _ in range(channel_count)])

    def channel(self, index: int) -> Optional[Channel]:
        """Get a channel by index, or None when out of range."""
        if 0 <= index < len(self.channels):
            return self.channels[index]
        return None

    def merge(self, other: "Timeline") -> "Timeline":
        """
        Append another timeline's items channel by channel.

        Used to join today and tomorrow into one continuous stream.
        """
        channels = []
        for i, channel in enumerate(self.channels):
            other_channel = other.channel(i)
            other_items = other_channel.items if other_channel else []
            channels.append(Channel(items=[*channel.items, *other_items]))
        return Timeline(channels=channels)

    def slice(self, window_start: datetime, window_length: timedelta) -> "Timeline":
        """
        Get the part of the timeline around a window.

        Keeps every item that ends at or after `window_start` and starts at
        or before the end of the window.
        """
        window_end = window_start + window_length

        channels = []
        for channel in self.channels:
            items = []
            for item in channel.items:
                if item.end_time < window_start:
                    continue
                if item.start_time > window_end:
                    break
                items.append(item)
            channels.append(Channel(items=items))

        return Timeline(channels=channels)

    @property
    def item_count(self) -> int:
        return sum(len(channel.items) for channel in self.channels)
