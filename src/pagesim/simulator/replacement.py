"""
Page replacement policies.

When a page fault occurs and no frame is free, the active policy picks
a victim frame whose page is evicted.

FIFO:
-----
Victim is the frame at the head of the load-order queue. Frames enter
the queue only when a page is installed while FIFO is active, never on
a hit. An empty queue falls back to frame 0.

LRU:
----
Victim is the frame with the smallest last_access_time across the
whole frame table, not just the faulting job's frames. Ties go to the
lowest frame index.

SWITCHING:
----------
Changing the active policy is not retroactive. The FIFO queue is not
rebuilt and timestamps are not recomputed; the switch only affects
which policy later faults consult.
"""

from __future__ import annotations

from enum import Enum
from typing import Deque, Sequence

from pagesim.models.frame import Frame


class ReplacementPolicy(Enum):
    """Selectable page replacement policies."""

    FIFO = "FIFO"
    LRU = "LRU"

    @classmethod
    def parse(cls, value: str | ReplacementPolicy) -> ReplacementPolicy:
        """Parse a policy name case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValueError(f"Invalid replacement policy: {value!r}. Must be FIFO or LRU.")


def fifo_victim(queue: Deque[int]) -> int:
    """Dequeue the oldest loaded frame index (frame 0 if the queue is empty)."""
    if not queue:
        return 0
    return queue.popleft()


def lru_victim(frames: Sequence[Frame]) -> int:
    """Index of the least recently used frame, lowest index on ties."""
    victim = 0
    oldest = None
    for index, frame in enumerate(frames):
        if oldest is None or frame.last_access_time < oldest:
            oldest = frame.last_access_time
            victim = index
    return victim


def select_victim(
    policy: ReplacementPolicy,
    fifo_queue: Deque[int],
    frames: Sequence[Frame]
) -> int:
    """
    Choose a victim frame index under the given policy.

    Args:
        policy: Active replacement policy.
        fifo_queue: Load-order queue (consumed by FIFO only).
        frames: The full frame table.

    Returns:
        Index of the frame to evict.
    """
    if policy == ReplacementPolicy.LRU:
        return lru_victim(frames)
    return fifo_victim(fifo_queue)