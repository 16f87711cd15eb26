"""
Document store interface.

The scheduling core only needs three things from the store: an ordered range
scan over clip numbers, and get/set of small JSON documents by key.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Set

from clipcast.errors import StatsNotFoundError
from clipcast.scheduling.state import ClipRecord, CorpusStats

logger = logging.getLogger(__name__)

STATS_KEY = "Info/VideoStatistics"


class DocumentStore(ABC):
    """Abstract store backend."""

    @abstractmethod
    def range_query(
        self,
        order_key: str = "number",
        start_at: int = 0,
        limit: int = 100,
    ) -> List[ClipRecord]:
        """
        List clip records ordered by `order_key`.

        Returns at most `limit` records, starting with the first record whose
        `order_key` value is >= `start_at`.
        """
        pass

    @abstractmethod
    def get_document(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a document, or None if it does not exist."""
        pass

    @abstractmethod
    def set_document(self, key: str, value: Dict[str, Any]) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    def put_clip(self, record: ClipRecord) -> None:
        """Write a numbered clip record."""
        pass

    def close(self) -> None:
        """Release backend resources."""

    def get_stats(self) -> CorpusStats:
        """
        Load the corpus statistics document.

        Raises:
            StatsNotFoundError: The corpus has never been populated.
        """
        document = self.get_document(STATS_KEY)
        if document is None:
            raise StatsNotFoundError("corpus statistics do not exist", key=STATS_KEY)
        return CorpusStats.from_document(document)

    def register_clips(self, clips: Iterable[ClipRecord]) -> CorpusStats:
        """
        Append clips to the corpus.

        Clips are numbered in ascending publish order, continuing after the
        current corpus count. Only clips published after the latest
        registered clip are new: older clips, the latest clip itself and
        repeated ids are skipped, so assigned numbers never change.

        Returns:
            The updated corpus statistics.
        """
        document = self.get_document(STATS_KEY)
        stats = CorpusStats.from_document(document) if document else CorpusStats()

        ordered = sorted(clips, key=lambda c: c.published_at)
        seen: Set[str] = set()
        added = 0
        for clip in ordered:
            if clip.id == stats.latest_clip_id or clip.id in seen:
                continue
            latest = stats.latest_clip_published_at
            if latest is not None and clip.published_at < latest:
                continue

            record = replace(clip, number=stats.count + added)
            self.put_clip(record)
            seen.add(record.id)
            added += 1
            stats.latest_clip_id = record.id
            stats.latest_clip_published_at = record.published_at

        if added > 0:
            stats.count += added
            self.set_document(STATS_KEY, stats.to_document())
            logger.info(f"Registered {added} clips, corpus size {stats.count}")

        return stats
