"""
Corpus records and statistics.

Clip records are numbered densely in publish order when they are ingested.
The sampler relies on that numbering to read the corpus in ordered ranges.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ClipRecord:
    """A single clip in the corpus."""

    id: str
    title: str
    published_at: datetime
    duration: timedelta
    number: int = -1  # Assigned by the store on registration


@dataclass
class CorpusStats:
    """
    Summary of the ingested corpus.

    `count` is the exclusive upper bound of valid clip numbers.
    """

    latest_clip_id: Optional[str] = None
    latest_clip_published_at: Optional[datetime] = None
    count: int = 0

    def to_document(self) -> Dict[str, Any]:
        """Convert to a store document."""
        published = self.latest_clip_published_at
        return {
            "latest_clip_id": self.latest_clip_id,
            "latest_clip_published_at": published.isoformat() if published else None,
            "count": self.count,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "CorpusStats":
        """Create from a store document."""
        published = document.get("latest_clip_published_at")
        published_at = datetime.fromisoformat(published) if published else None
        if published_at is not None and published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        return cls(
            latest_clip_id=document.get("latest_clip_id"),
            latest_clip_published_at=published_at,
            count=int(document.get("count", 0)),
        )
