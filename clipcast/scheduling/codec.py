"""
Timeline document encoding.

A timeline document stores each channel as its own JSON blob under
`channel1` .. `channelN`, so a channel can be decoded without the others.
"""

import json
from datetime import datetime, timedelta
from typing import Any, Dict

from clipcast.scheduling.timeline import Channel, Timeline, TimelineItem


def channel_field(index: int) -> str:
    """Document field holding the channel at `index` (zero-based)."""
    return f"channel{index + 1}"


def item_to_dict(item: TimelineItem) -> Dict[str, Any]:
    """Convert a timeline item to a JSON-friendly dictionary."""
    return {
        "start_time": item.start_time.isoformat(),
        "duration": item.duration.total_seconds(),
        "clip_id": item.clip_id,
    }


def item_from_dict(data: Dict[str, Any]) -> TimelineItem:
    return TimelineItem(
        start_time=datetime.fromisoformat(data["start_time"]),
        duration=timedelta(seconds=data["duration"]),
        clip_id=data["clip_id"],
    )


def channel_to_dict(channel: Channel) -> Dict[str, Any]:
    return {"items": [item_to_dict(item) for item in channel.items]}


def timeline_to_dict(timeline: Timeline) -> Dict[str, Any]:
    """Convert a timeline to the response shape used by the API."""
    return {"channels": [channel_to_dict(channel) for channel in timeline.channels]}


def encode_channel(channel: Channel) -> str:
    return json.dumps(channel_to_dict(channel), separators=(",", ":"))


def decode_channel(blob: str) -> Channel:
    data = json.loads(blob)
    return Channel(items=[item_from_dict(item) for item in data.get("items") or []])


def encode_timeline(timeline: Timeline) -> Dict[str, str]:
    """Encode a timeline into a store document."""
    return {
        channel_field(i): encode_channel(channel)
        for i, channel in enumerate(timeline.channels)
    }


def decode_timeline(document: Dict[str, Any], channel_count: int) -> Timeline:
    """
    Decode a store document into a timeline.

    Missing channel fields decode as empty channels.

    Raises:
        ValueError: A channel blob is not valid JSON.
    """
    channels = []
    for i in range(channel_count):
        blob = document.get(channel_field(i))
        channels.append(decode_channel(blob) if blob else Channel())
    return Timeline(channels=channels)
