"""
Incremental random sampler over the clip corpus.

The sampler keeps a working subset of the corpus in memory and grows it in
fixed-size windows read from the store. Windows are planned against the
ranges already loaded so each read contributes new clips.
"""

import logging
import random
from typing import TYPE_CHECKING, AbstractSet, Dict, List, Optional

from clipcast.config import SamplerConfig
from clipcast.errors import ExhaustedError
from clipcast.scheduling.intervals import Interval, merge, plan_fetch
from clipcast.scheduling.state import ClipRecord

if TYPE_CHECKING:
    from clipcast.store.base import DocumentStore

logger = logging.getLogger(__name__)


class CorpusSampler:
    """
    Exclusion-aware random draws from a lazily loaded corpus.

    One sampler serves one scheduling run; it is not shared between runs.
    """

    def __init__(
        self,
        store: "DocumentStore",
        corpus_size: int,
        rng: Optional[random.Random] = None,
        settings: Optional[SamplerConfig] = None,
    ):
        self.store = store
        self.corpus_size = corpus_size
        self.rng = rng or random.Random()
        self.settings = settings or SamplerConfig()

        self._records: Dict[str, ClipRecord] = {}
        self._pool: List[ClipRecord] = []
        self._blocks: List[Interval] = []
        self.total_requested = 0

    @classmethod
    def from_store(
        cls,
        store: "DocumentStore",
        rng: Optional[random.Random] = None,
        settings: Optional[SamplerConfig] = None,
    ) -> "CorpusSampler":
        """
        Create a sampler sized from the corpus statistics and prime its pool.

        Raises:
            StatsNotFoundError: The corpus has never been populated.
            ExhaustedError: The initial pool could not be loaded.
        """
        stats = store.get_stats()
        sampler = cls(store, stats.count, rng=rng, settings=settings)
        sampler.ensure(min(sampler.settings.initial_pool, stats.count))
        return sampler

    def __len__(self) -> int:
        return len(self._pool)

    @property
    def blocks(self) -> List[Interval]:
        """Loaded number ranges."""
        return list(self._blocks)

    @property
    def records(self) -> List[ClipRecord]:
        return list(self._pool)

    def ensure(self, min_count: int) -> None:
        """
        Load records until at least `min_count` are in the pool.

        Raises:
            ExhaustedError: `min_count` exceeds the corpus, the fetch budget
                ran out, or no unloaded range is left.
        """
        if min_count > self.corpus_size:
            raise ExhaustedError(
                "requested pool is larger than the corpus",
                min_count=min_count,
                corpus_size=self.corpus_size,
            )

        window_size = self.settings.window_size
        requested = 0
        while len(self._pool) < min_count:
            if requested >= self.settings.fetch_budget:
                raise ExhaustedError(
                    "fetch budget exceeded",
                    requested=requested,
                    loaded=len(self._pool),
                    min_count=min_count,
                )

            window = plan_fetch(
                self._random_start(),
                window_size,
                self.corpus_size,
                self._blocks,
                self.rng,
            )
            if window.is_empty:
                raise ExhaustedError(
                    "no unloaded range left to fetch",
                    loaded=len(self._pool),
                    corpus_size=self.corpus_size,
                )

            logger.debug(f"fetch clips: start={window.start} count={window.length}")
            records = self.store.range_query(
                order_key="number",
                start_at=window.start,
                limit=window.length,
            )
            requested += window.length
            self.total_requested += window.length

            for record in records:
                if record.id in self._records:
                    continue
                self._records[record.id] = record
                self._pool.append(record)

            self._blocks = merge(self._blocks, window)

        if requested:
            logger.info(f"Fetched {requested} clip numbers, pool size {len(self._pool)}")

    def draw(self, exclude: AbstractSet[str]) -> ClipRecord:
        """
        Pick a random loaded clip whose id is not in `exclude`.

        The pool is grown until it holds at least one clip outside
        `exclude`, then candidates are rejection-sampled.

        Raises:
            ExhaustedError: The whole corpus is excluded or cannot be loaded.
        """
        while len(self._pool) <= self._excluded_count(exclude):
            if len(self._pool) >= self.corpus_size:
                raise ExhaustedError(
                    "every clip in the corpus is excluded",
                    excluded=len(exclude),
                    corpus_size=self.corpus_size,
                )
            self.ensure(min(len(self._pool) + self.settings.top_up, self.corpus_size))

        while True:
            record = self._pool[self.rng.randrange(len(self._pool))]
            if record.id not in exclude:
                return record

    def _excluded_count(self, exclude: AbstractSet[str]) -> int:
        return sum(1 for clip_id in exclude if clip_id in self._records)

    def _random_start(self) -> int:
        upper = self.corpus_size - self.settings.start_margin
        if upper <= 0:
            upper = self.corpus_size
        return self.rng.randrange(upper)
