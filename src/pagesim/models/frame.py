"""
Physical memory frame model.

A frame is either free or holds exactly one (job ID, page number) pair.
The frame table is a plain list of Frame objects indexed by frame ID,
owned by the MemorySystem.

STATUS BITS:
------------
referenced: Set whenever the resident page is loaded or accessed.
modified:   Set by a WRITE access; cleared when a new page is installed.

last_access_time holds the global clock value at the most recent load
or access and drives LRU victim selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Frame:
    """
    One slot of simulated physical memory.

    Attributes:
        frame_id: Index of this frame in the frame table.
        size: Frame size in bytes.
        free: True if no page is resident.
        owner_job_id: Job holding this frame (None when free).
        page_number: Page held in this frame (None when free).
        last_access_time: Global clock at last load/access.
        referenced: Reference bit.
        modified: Dirty bit.
    """

    frame_id: int
    size: int
    free: bool = True
    owner_job_id: Optional[int] = None
    page_number: Optional[int] = None
    last_access_time: int = 0
    referenced: bool = False
    modified: bool = False

    def install(
        self,
        job_id: int,
        page_number: int,
        time: int,
        referenced: bool = True
    ) -> None:
        """Place a page in this frame, overwriting any previous occupant."""
        self.free = False
        self.owner_job_id = job_id
        self.page_number = page_number
        self.last_access_time = time
        self.referenced = referenced
        self.modified = False

    def release(self) -> None:
        """Return this frame to the free state."""
        self.free = True
        self.owner_job_id = None
        self.page_number = None
        self.referenced = False
        self.modified = False

    def touch(self, time: int, write: bool = False) -> None:
        """Record an access to the resident page."""
        self.last_access_time = time
        self.referenced = True
        if write:
            self.modified = True

    def holds(self, job_id: int, page_number: int) -> bool:
        return (
            not self.free
            and self.owner_job_id == job_id
            and self.page_number == page_number
        )
