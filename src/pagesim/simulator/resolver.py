"""
Logical to physical address resolution.

ADDRESS SPLIT:
--------------
    page_number = logical_address // page_size
    offset      = logical_address %  page_size

    physical_address = frame_id * frame_size + offset

Example with page_size = frame_size = 512, page 1 in frame 6:

    logical 700 -> page 1, offset 188 -> physical 6 * 512 + 188 = 3260

RESIDENCY:
----------
Static resolution (demand=False) reports PageNotLoaded for a page that
is not resident and changes nothing. Demand resolution (demand=True)
routes every access through MemorySystem.load_page(), so a missing page
is faulted in transparently and a resident page counts as a hit.

INTEGRITY:
----------
The frame named by the page table must exist and the offset must fit in
that frame. Frame size always equals page size in a well-formed system,
but a mismatch is reported as InvalidMapping rather than producing a
bogus address.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from pagesim.simulator.faults import (
    AccessType,
    InvalidMapping,
    OutOfBounds,
    PageNotLoaded,
)

if TYPE_CHECKING:
    from pagesim.models.job import Job
    from pagesim.simulator.memory import MemorySystem, PageAccess


@dataclass
class Resolution:
    """
    Result of resolving one logical address.

    Attributes:
        job_id: Job whose address space was used.
        logical_address: Input address.
        page_number: logical_address // page_size.
        offset: logical_address % page_size.
        frame_id: Frame holding the page.
        physical_address: frame_id * frame_size + offset.
        access: The demand load performed, if any.
    """

    job_id: int
    logical_address: int
    page_number: int
    offset: int
    frame_id: int
    physical_address: int
    access: Optional[PageAccess] = None

    @property
    def faulted(self) -> bool:
        return self.access is not None and not self.access.hit

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "job_id": self.job_id,
            "logical_address": self.logical_address,
            "page_number": self.page_number,
            "offset": self.offset,
            "frame_id": self.frame_id,
            "physical_address": self.physical_address,
            "access": self.access.to_dict() if self.access else None,
        }


def split_address(logical_address: int, page_size: int) -> tuple[int, int]:
    """Split a logical address into (page number, offset)."""
    return divmod(logical_address, page_size)


def resolve(
    memory: MemorySystem,
    job: Job,
    logical_address: int,
    demand: bool = True,
    access_type: AccessType = AccessType.READ
) -> Resolution:
    """
    Resolve a logical address of `job` to a physical address.

    Args:
        memory: The memory system holding the frame table.
        job: Job whose address space is used.
        logical_address: Address in [0, job.size).
        demand: If True, load a missing page instead of failing.
        access_type: READ or WRITE (demand loads only).

    Returns:
        Resolution record.

    Raises:
        UnknownJob: `job` is not the registered instance.
        OutOfBounds: Address outside the job. Nothing is mutated.
        PageNotLoaded: Static resolution of a non-resident page.
        InvalidMapping: Page table names a bad frame or the offset
            does not fit the frame.
    """
    job = memory.registered(job)
    if logical_address < 0 or logical_address >= job.size:
        raise OutOfBounds(job=job.job_id, address=logical_address, limit=job.size)

    page_number, offset = split_address(logical_address, job.page_size)

    access = None
    if demand:
        access = memory.load_page(job, page_number, access_type)
    elif not job.is_resident(page_number):
        raise PageNotLoaded(job=job.job_id, page_number=page_number)

    frame_id = job.page_table[page_number]
    if not 0 <= frame_id < len(memory.frames):
        raise InvalidMapping(
            job=job.job_id,
            page_number=page_number,
            frame_id=frame_id,
            offset=offset,
        )

    frame_size = memory.frames[frame_id].size
    if offset >= frame_size:
        raise InvalidMapping(
            job=job.job_id,
            page_number=page_number,
            frame_id=frame_id,
            offset=offset,
            frame_size=frame_size,
        )

    return Resolution(
        job_id=job.job_id,
        logical_address=logical_address,
        page_number=page_number,
        offset=offset,
        frame_id=frame_id,
        physical_address=frame_id * frame_size + offset,
        access=access,
    )
