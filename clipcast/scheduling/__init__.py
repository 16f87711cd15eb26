"""
ClipCast Scheduling Engine

Daily multi-channel timeline generation over an append-only clip corpus.

Features:
- Interval tracking so corpus ranges are never read twice
- Incremental, exclusion-aware random sampling
- Parallel channels with no same-day repeats
- Clips carried across midnight
- Timeline merging, slicing and "what is playing now" queries
"""

from clipcast.scheduling.builder import TimelineBuilder
from clipcast.scheduling.codec import decode_timeline, encode_timeline, timeline_to_dict
from clipcast.scheduling.intervals import Interval, blocks_from, merge, plan_fetch
from clipcast.scheduling.sampler import CorpusSampler
from clipcast.scheduling.state import ClipRecord, CorpusStats
from clipcast.scheduling.timeline import (
    ZERO_TIME,
    Channel,
    Timeline,
    TimelineItem,
    schedule_key,
    start_of_day,
)

__all__ = [
    # Builder
    "TimelineBuilder",
    # Codec
    "decode_timeline",
    "encode_timeline",
    "timeline_to_dict",
    # Intervals
    "Interval",
    "blocks_from",
    "merge",
    "plan_fetch",
    # Sampler
    "CorpusSampler",
    # State
    "ClipRecord",
    "CorpusStats",
    # Timeline
    "ZERO_TIME",
    "Channel",
    "Timeline",
    "TimelineItem",
    "schedule_key",
    "start_of_day",
]
