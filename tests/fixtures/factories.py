"""
Test Data Factories

Factory classes for generating test data.
"""

import random
import string
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from clipcast.scheduling.state import ClipRecord
from clipcast.scheduling.timeline import Channel, TimelineItem
from clipcast.store.base import DocumentStore
from clipcast.store.memory import MemoryDocumentStore

EPOCH = datetime(2020, 1, 1, tzinfo=timezone.utc)


class BaseFactory:
    """Base factory class."""

    _counter = 0

    @classmethod
    def _next_id(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def _random_string(cls, length: int = 8) -> str:
        return ''.join(random.choices(string.ascii_letters, k=length))


class ClipFactory(BaseFactory):
    """Factory for creating ClipRecord test instances."""

    @classmethod
    def create(
        cls,
        number: int = -1,
        duration: timedelta = timedelta(minutes=5),
        clip_id: Optional[str] = None,
        **kwargs
    ) -> ClipRecord:
        """Create a ClipRecord instance."""
        serial = cls._next_id()
        return ClipRecord(
            id=clip_id or f"clip-{serial:06d}",
            title=kwargs.get("title", f"Test Clip {cls._random_string()}"),
            published_at=kwargs.get("published_at", EPOCH + timedelta(hours=serial)),
            duration=duration,
            number=number,
        )

    @classmethod
    def create_numbered(
        cls,
        count: int,
        duration: timedelta = timedelta(minutes=5),
        start: int = 0,
    ) -> List[ClipRecord]:
        """Create clips numbered start .. start+count-1."""
        return [cls.create(number=start + i, duration=duration) for i in range(count)]


class StoreFactory:
    """Factory for document stores with a registered corpus."""

    @classmethod
    def populate(
        cls,
        store: DocumentStore,
        count: int,
        duration: timedelta = timedelta(minutes=5),
    ) -> DocumentStore:
        """Register `count` clips with the same duration."""
        store.register_clips(ClipFactory.create(duration=duration) for _ in range(count))
        return store

    @classmethod
    def memory(cls, count: int, duration: timedelta = timedelta(minutes=5)) -> MemoryDocumentStore:
        store = MemoryDocumentStore()
        cls.populate(store, count, duration)
        return store


def make_channel(start: datetime, durations_minutes: List[int], prefix: str = "c") -> Channel:
    """Build a contiguous channel from a list of durations."""
    items = []
    current = start
    for i, minutes in enumerate(durations_minutes):
        duration = timedelta(minutes=minutes)
        items.append(TimelineItem(start_time=current, duration=duration, clip_id=f"{prefix}{i}"))
        current += duration
    return Channel(items=items)
