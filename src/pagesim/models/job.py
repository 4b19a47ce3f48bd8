"""
Job and page descriptor models.

A job is characterised only by its total size. It is split into
fixed-size pages, and each page may or may not be resident in a
physical frame at any moment.

SEGMENTATION:
-------------
    num_pages = size // page_size (+1 if there is a remainder)
    internal_fragmentation = page_size - (size % page_size), or 0

Example with page_size = 512:

| Job Size | Pages | Last Page Used | Internal Fragmentation |
|----------|-------|----------------|------------------------|
| 1000     | 2     | 488 bytes      | 24 bytes               |
| 1024     | 2     | 512 bytes      | 0 bytes                |
| 0        | 0     | -              | 0 bytes                |

PAGE TABLE INVARIANT:
---------------------
Every key of `page_table` is in `loaded_pages` and vice versa. Only
the MemorySystem mutates these two collections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from pagesim.simulator.faults import InvalidConfig


# Default duration heuristic: one time unit per 500 bytes, at least one
BYTES_PER_TIME_UNIT = 500


def divide_into_pages(size: int, page_size: int) -> Tuple[List[int], int]:
    """
    Split a job of `size` bytes into pages of `page_size` bytes.

    Args:
        size: Total job size in bytes (>= 0).
        page_size: Page size in bytes (> 0).

    Returns:
        Tuple of (page numbers 0..n-1, internal fragmentation in bytes).

    Raises:
        InvalidConfig: If size is negative or page_size is not positive.
    """
    if page_size <= 0:
        raise InvalidConfig(parameter="page_size", value=page_size)
    if size < 0:
        raise InvalidConfig(
            message=f"size must be >= 0, got {size}", parameter="size", value=size
        )

    num_pages, remainder = divmod(size, page_size)
    if remainder > 0:
        num_pages += 1
        fragmentation = page_size - remainder
    else:
        fragmentation = 0

    return list(range(num_pages)), fragmentation


def default_duration(size: int) -> int:
    """Default run time for a job with no explicit duration."""
    return max(1, size // BYTES_PER_TIME_UNIT)


@dataclass
class Job:
    """
    A simulated job and its page map.

    Attributes:
        job_id: Unique job identifier.
        size: Total size in bytes.
        page_size: Page size in bytes (equals the frame size).
        pages: Page numbers 0..n-1.
        internal_fragmentation: Unused bytes in the last page.
        page_table: Resident page number -> frame ID.
        loaded_pages: Set of resident page numbers.
        page_faults: Number of faults taken by this job.
        arrival_time: Arrival tick (event-driven runs).
        duration: Ticks the job runs once allocated.
        start_time: Tick the job was allocated, -1 if never.
    """

    job_id: int
    size: int
    page_size: int
    pages: List[int] = field(default_factory=list)
    internal_fragmentation: int = 0
    page_table: Dict[int, int] = field(default_factory=dict)
    loaded_pages: Set[int] = field(default_factory=set)
    page_faults: int = 0
    arrival_time: int = 0
    duration: int = 1
    start_time: int = -1

    @classmethod
    def create(
        cls,
        job_id: int,
        size: int,
        page_size: int,
        arrival_time: int = 0,
        duration: int | None = None
    ) -> Job:
        """
        Build a job and divide it into pages.

        Raises:
            InvalidConfig: If size or page_size is invalid.
        """
        pages, fragmentation = divide_into_pages(size, page_size)
        return cls(
            job_id=job_id,
            size=size,
            page_size=page_size,
            pages=pages,
            internal_fragmentation=fragmentation,
            arrival_time=arrival_time,
            duration=duration if duration is not None else default_duration(size),
        )

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def resident_count(self) -> int:
        return len(self.loaded_pages)

    def is_resident(self, page_number: int) -> bool:
        return page_number in self.loaded_pages

    def map_page(self, page_number: int, frame_id: int) -> None:
        """Record that a page is now resident in a frame."""
        self.page_table[page_number] = frame_id
        self.loaded_pages.add(page_number)

    def unmap_page(self, page_number: int) -> None:
        """Forget a page's frame mapping (no-op if not resident)."""
        self.page_table.pop(page_number, None)
        self.loaded_pages.discard(page_number)

    def clear_page_table(self) -> None:
        self.page_table.clear()
        self.loaded_pages.clear()

    def missing_pages(self) -> List[int]:
        """Pages that are not resident, in ascending order."""
        return [p for p in self.pages if p not in self.loaded_pages]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "job_id": self.job_id,
            "size": self.size,
            "page_size": self.page_size,
            "page_count": self.page_count,
            "internal_fragmentation": self.internal_fragmentation,
            "page_table": {str(p): f for p, f in sorted(self.page_table.items())},
            "page_faults": self.page_faults,
            "arrival_time": self.arrival_time,
            "duration": self.duration,
            "start_time": self.start_time,
        }
