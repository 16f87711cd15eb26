"""
Interval tracking for incremental corpus reads.

The corpus can only be read through ordered range scans, so the sampler keeps
a sorted list of number ranges it has already loaded and moves each new fetch
window off those ranges.
"""

import random
from dataclasses import dataclass
from typing import Iterable, List

from clipcast.scheduling.state import ClipRecord


@dataclass(frozen=True)
class Interval:
    """A range of clip numbers, `length` values starting at `start`."""

    start: int
    length: int

    @property
    def stop(self) -> int:
        """First number after the interval."""
        return self.start + self.length

    @property
    def last(self) -> int:
        """Last number inside the interval."""
        return self.start + self.length - 1

    @property
    def is_empty(self) -> bool:
        return self.length <= 0


def blocks_from(records: Iterable[ClipRecord]) -> List[Interval]:
    """
    Build sorted, merged intervals from the numbers of loaded records.

    Args:
        records: Loaded clip records.

    Returns:
        Intervals covering exactly the loaded numbers.
    """
    numbers = sorted({record.number for record in records})

    blocks: List[Interval] = []
    run_start = None
    run_length = 0
    for number in numbers:
        if run_start is not None and number == run_start + run_length:
            run_length += 1
            continue

        if run_start is not None:
            blocks.append(Interval(run_start, run_length))
        run_start = number
        run_length = 1

    if run_start is not None:
        blocks.append(Interval(run_start, run_length))

    return blocks


def merge(intervals: List[Interval], new_interval: Interval) -> List[Interval]:
    """
    Insert an interval into a sorted interval list.

    Touching intervals are merged as if they overlapped, so the result is
    sorted, pairwise disjoint and never adjacent.
    """
    candidates = sorted(
        (b for b in [*intervals, new_interval] if not b.is_empty),
        key=lambda b: b.start,
    )

    result: List[Interval] = []
    for block in candidates:
        if result and result[-1].stop >= block.start:
            current = result[-1]
            result[-1] = Interval(current.start, max(current.stop, block.stop) - current.start)
        else:
            result.append(block)

    return result


def plan_fetch(
    desired_start: int,
    desired_length: int,
    corpus_size: int,
    blocks: List[Interval],
    rng: random.Random,
) -> Interval:
    """
    Adjust a proposed fetch window so it avoids already-loaded ranges.

    A window that touches no block is returned as is (clipped to the corpus).
    Otherwise it is slid off the first block it overlaps, to the left or to
    the right, and clamped by the neighbouring block or the corpus bounds.
    The direction is forced right when the block starts at 0 and forced left
    when the block itself (not the window) reaches the end of the corpus;
    otherwise it is a coin flip.

    Args:
        desired_start: First number of the proposed window.
        desired_length: Number of records wanted.
        corpus_size: Exclusive upper bound of clip numbers.
        blocks: Loaded intervals, sorted and merged.
        rng: Generator used for the left/right coin flip.

    Returns:
        The window to fetch. A non-positive length means there is no room.
    """
    start = max(desired_start, 0)
    length = min(desired_length, corpus_size - start)
    window = Interval(start, length)
    if window.is_empty:
        return window

    for i, block in enumerate(blocks):
        if window.last < block.start:
            break
        if window.start > block.last:
            continue

        if block.start == 0:
            slide_left = False
        elif block.stop >= corpus_size:
            slide_left = True
        else:
            slide_left = rng.randrange(2) == 0

        if slide_left:
            new_last = block.start - 1
            lower = blocks[i - 1].stop if i > 0 else 0
            new_start = max(new_last - desired_length + 1, lower)
            return Interval(new_start, new_last - new_start + 1)

        new_start = block.stop
        upper = blocks[i + 1].start - 1 if i + 1 < len(blocks) else corpus_size - 1
        new_last = min(new_start + desired_length - 1, upper)
        return Interval(new_start, new_last - new_start + 1)

    return window
