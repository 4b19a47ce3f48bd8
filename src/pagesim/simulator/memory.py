"""
MemorySystem - the frame table, allocator and demand pager.

This module holds all mutable simulation state in one aggregate:

- Frame table: list of Frame records indexed by frame ID
- Global clock: monotonic counter stamped into frames for LRU
- FIFO queue: frame indices in load order
- Job index: job ID -> Job, used to find a victim's owner in O(1)
- Active replacement policy and a private RNG for random placement

STATIC ALLOCATION:
------------------
allocate_random() places every non-resident page of a job at once, or
nothing at all. Free frame indices are shuffled and handed out in
shuffled order, so the physical frame a page lands in is random.

DEMAND PAGING:
--------------
load_page() brings a single page in on first use:
1. Hit: page already resident, stamp the frame with a new clock value
2. Fault: count the fault, advance the clock, then
   a. take the first free frame, or
   b. ask the replacement policy for a victim and evict its page
   c. install the new page and map it in the job's page table
   d. append the frame to the FIFO queue if FIFO is active

CLOCK:
------
The clock advances on every demand access, hit or fault. This keeps
LRU timestamps strictly ordered. Static resolution never advances it.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional

from pagesim.logging_config import get_logger
from pagesim.models.frame import Frame
from pagesim.models.job import Job
from pagesim.models.snapshot import (
    FrameSnapshot,
    JobSnapshot,
    MemoryUsage,
    PageSnapshot,
)
from pagesim.simulator.faults import (
    AccessType,
    DuplicateJob,
    InsufficientMemory,
    InvalidConfig,
    OutOfBounds,
    UnknownJob,
)
from pagesim.simulator.replacement import ReplacementPolicy, select_victim
from pagesim.simulator.resolver import Resolution, resolve
from pagesim.simulator.scheduler import (
    DEFAULT_MAX_TICKS,
    SimulationResult,
    run_event_simulation,
)


logger = get_logger(__name__)


@dataclass
class PageAccess:
    """
    Result of a single load_page() call.

    Attributes:
        job_id: Job that accessed the page.
        page_number: Page accessed.
        frame_id: Frame holding the page afterwards.
        hit: True if the page was already resident.
        time: Clock value stamped on the frame.
        evicted_job_id: Owner of the evicted page (faults with eviction only).
        evicted_page_number: Evicted page number.
    """

    job_id: int
    page_number: int
    frame_id: int
    hit: bool
    time: int
    evicted_job_id: Optional[int] = None
    evicted_page_number: Optional[int] = None

    @property
    def evicted(self) -> bool:
        return self.evicted_page_number is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "job_id": self.job_id,
            "page_number": self.page_number,
            "frame_id": self.frame_id,
            "result": "HIT" if self.hit else "FAULT",
            "time": self.time,
            "evicted_job_id": self.evicted_job_id,
            "evicted_page_number": self.evicted_page_number,
        }


class MemorySystem:
    """
    Aggregate owning the frame table, clock, FIFO queue and job index.

    Usage:
        memory = MemorySystem(frame_count=8, frame_size=512, seed=1)
        job = memory.add_job(Job.create(1, 1000, memory.frame_size))
        memory.allocate_random(job)
        resolution = memory.resolve_address(1, 700)

    All operations are synchronous and either complete fully or leave
    state unchanged.
    """

    def __init__(
        self,
        frame_count: int = 0,
        frame_size: int = 0,
        policy: ReplacementPolicy = ReplacementPolicy.FIFO,
        seed: Optional[int] = None
    ):
        """
        Initialize the memory system.

        Args:
            frame_count: Number of frames (0 leaves memory unconfigured).
            frame_size: Size of each frame in bytes.
            policy: Initial replacement policy.
            seed: Seed for the random placement RNG.
        """
        self.frames: List[Frame] = []
        self.frame_size = 0
        self.clock = 0
        self.fifo_queue: Deque[int] = deque()
        self.policy = policy
        self.jobs: Dict[int, Job] = {}
        self.rng = random.Random(seed)

        if frame_count or frame_size:
            self.configure_memory(frame_count, frame_size)

    # ------------------------------------------------------------------
    # Frame table
    # ------------------------------------------------------------------

    def configure_memory(self, frame_count: int, frame_size: int) -> None:
        """
        Reset the frame table to `frame_count` free frames.

        This is a full reset: the FIFO queue and clock are cleared and
        every registered job loses its page table.

        Raises:
            InvalidConfig: If frame_count or frame_size is not positive.
        """
        if frame_count <= 0:
            raise InvalidConfig(parameter="frame_count", value=frame_count)
        if frame_size <= 0:
            raise InvalidConfig(parameter="frame_size", value=frame_size)

        for job in self.jobs.values():
            job.clear_page_table()

        self.frames = [Frame(frame_id=i, size=frame_size) for i in range(frame_count)]
        self.frame_size = frame_size
        self.fifo_queue.clear()
        self.clock = 0
        logger.info("Configured %d frames of %d bytes", frame_count, frame_size)

    def find_free_frame(self) -> Optional[int]:
        """First-fit scan for a free frame index."""
        for index, frame in enumerate(self.frames):
            if frame.free:
                return index
        return None

    def free_frame_indices(self) -> List[int]:
        return [i for i, frame in enumerate(self.frames) if frame.free]

    def free_frame_count(self) -> int:
        return sum(1 for frame in self.frames if frame.free)

    def set_replacement_policy(self, policy: ReplacementPolicy | str) -> None:
        """Switch the policy consulted by future faults."""
        self.policy = ReplacementPolicy.parse(policy)
        logger.info("Replacement policy set to %s", self.policy.value)

    # ------------------------------------------------------------------
    # Job index
    # ------------------------------------------------------------------

    def add_job(self, job: Job) -> Job:
        """
        Register a job.

        Raises:
            DuplicateJob: If the ID is already registered.
        """
        if job.job_id in self.jobs:
            raise DuplicateJob(job=job.job_id)
        self.jobs[job.job_id] = job
        return job

    def get_job(self, job_id: int) -> Job:
        """
        Look up a job by ID.

        Raises:
            UnknownJob: If no job has this ID.
        """
        try:
            return self.jobs[job_id]
        except KeyError:
            raise UnknownJob(job=job_id) from None

    def registered(self, job: Job | int) -> Job:
        """
        Resolve a job or job ID to the instance held in the job index.

        Raises:
            UnknownJob: If the ID is not registered, or `job` is not the
                registered instance for its ID.
        """
        if not isinstance(job, Job):
            return self.get_job(job)
        if self.jobs.get(job.job_id) is not job:
            raise UnknownJob(
                message=f"Job {job.job_id} is not registered with this memory system",
                job=job.job_id,
            )
        return job

    def remove_job(self, job_id: int) -> Job:
        """Free a job's frames and unregister it."""
        job = self.get_job(job_id)
        self.free_job_frames(job_id)
        del self.jobs[job_id]
        return job

    # ------------------------------------------------------------------
    # Static allocation
    # ------------------------------------------------------------------

    def allocate_random(self, job: Job) -> List[int]:
        """
        Place every non-resident page of `job` in a random free frame.

        All-or-nothing: if there are not enough free frames, nothing is
        changed.

        Args:
            job: The job to place.

        Returns:
            Frame IDs assigned, in page order.

        Raises:
            InsufficientMemory: If free frames < pages to place.
            UnknownJob: If the job is not registered.
        """
        job = self.registered(job)
        pages = job.missing_pages()
        free = self.free_frame_indices()

        if len(pages) > len(free):
            raise InsufficientMemory(
                job=job.job_id,
                required=len(pages),
                available=len(free)
            )

        self.rng.shuffle(free)
        assigned = []
        for page_number, index in zip(pages, free):
            frame = self.frames[index]
            frame.install(job.job_id, page_number, self.clock, referenced=False)
            job.map_page(page_number, frame.frame_id)
            assigned.append(frame.frame_id)

        logger.info(
            "Allocated Job %d: %d pages -> frames %s",
            job.job_id, len(assigned), assigned
        )
        return assigned

    def free_job_frames(self, job_id: int) -> int:
        """
        Release every frame owned by `job_id` and clear its page table.

        Idempotent. Freed frames are also dropped from the FIFO queue.

        Returns:
            Number of frames released.
        """
        released = set()
        for index, frame in enumerate(self.frames):
            if not frame.free and frame.owner_job_id == job_id:
                frame.release()
                released.add(index)

        if released:
            self.fifo_queue = deque(i for i in self.fifo_queue if i not in released)

        job = self.jobs.get(job_id)
        if job is not None:
            job.clear_page_table()

        if released:
            logger.info("Freed %d frames of Job %d", len(released), job_id)
        return len(released)

    # ------------------------------------------------------------------
    # Demand paging
    # ------------------------------------------------------------------

    def load_page(
        self,
        job: Job | int,
        page_number: int,
        access_type: AccessType = AccessType.READ
    ) -> PageAccess:
        """
        Make a page resident, faulting it in if needed.

        Args:
            job: Job or job ID.
            page_number: Page to access.
            access_type: READ or WRITE (WRITE sets the modified bit).

        Returns:
            PageAccess describing the hit or fault.

        Raises:
            UnknownJob: If the job is not registered.
            OutOfBounds: If the page is not part of the job.
            InvalidConfig: If memory has not been configured.
        """
        job = self.registered(job)
        if not 0 <= page_number < job.page_count:
            raise OutOfBounds(
                job=job.job_id,
                address=page_number * job.page_size,
                limit=job.size
            )
        if not self.frames:
            raise InvalidConfig(parameter="frame_count", value=0)

        write = access_type == AccessType.WRITE

        if job.is_resident(page_number):
            self.clock += 1
            frame = self.frames[job.page_table[page_number]]
            frame.touch(self.clock, write=write)
            logger.debug(
                "HIT  Job %d page %d in frame %d (t=%d)",
                job.job_id, page_number, frame.frame_id, self.clock
            )
            return PageAccess(
                job_id=job.job_id,
                page_number=page_number,
                frame_id=frame.frame_id,
                hit=True,
                time=self.clock
            )

        job.page_faults += 1
        self.clock += 1

        evicted_job_id = None
        evicted_page = None
        index = self.find_free_frame()
        if index is None:
            index = select_victim(self.policy, self.fifo_queue, self.frames)
            victim = self.frames[index]
            evicted_job_id = victim.owner_job_id
            evicted_page = victim.page_number
            owner = self.jobs.get(evicted_job_id)
            if owner is not None:
                owner.unmap_page(evicted_page)
            logger.debug(
                "EVICT Job %s page %s from frame %d (%s)",
                evicted_job_id, evicted_page, index, self.policy.value
            )

        frame = self.frames[index]
        frame.install(job.job_id, page_number, self.clock)
        if write:
            frame.modified = True
        job.map_page(page_number, frame.frame_id)

        if self.policy == ReplacementPolicy.FIFO:
            self.fifo_queue.append(index)

        logger.debug(
            "FAULT Job %d page %d -> frame %d (t=%d, faults=%d)",
            job.job_id, page_number, frame.frame_id, self.clock, job.page_faults
        )
        return PageAccess(
            job_id=job.job_id,
            page_number=page_number,
            frame_id=frame.frame_id,
            hit=False,
            time=self.clock,
            evicted_job_id=evicted_job_id,
            evicted_page_number=evicted_page
        )

    def resolve_address(
        self,
        job_id: int,
        logical_address: int,
        demand: bool = True,
        access_type: AccessType = AccessType.READ
    ) -> Resolution:
        """
        Translate a job's logical address to a physical address.

        See pagesim.simulator.resolver.resolve for the algorithm.

        Returns:
            Resolution record.
        """
        return resolve(self, self.get_job(job_id), logical_address, demand, access_type)

    def run_event_simulation(
        self,
        max_ticks: int = DEFAULT_MAX_TICKS,
        tick_delay: float = 0.0
    ) -> SimulationResult:
        """Run the arrival/completion simulation over all registered jobs."""
        return run_event_simulation(self, max_ticks=max_ticks, tick_delay=tick_delay)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def job_snapshots(self) -> List[JobSnapshot]:
        """Job Table rows in registration order."""
        return [
            JobSnapshot(
                job_id=job.job_id,
                size=job.size,
                page_count=job.page_count,
                loaded_page_count=job.resident_count,
                fault_count=job.page_faults,
                internal_fragmentation=job.internal_fragmentation,
            )
            for job in self.jobs.values()
        ]

    def page_snapshots(self, job_id: Optional[int] = None) -> List[PageSnapshot]:
        """Page Map Table rows for one job or all jobs."""
        jobs = [self.get_job(job_id)] if job_id is not None else self.jobs.values()
        rows = []
        for job in jobs:
            for page_number in job.pages:
                frame_id = job.page_table.get(page_number)
                frame = None
                if frame_id is not None and 0 <= frame_id < len(self.frames):
                    frame = self.frames[frame_id]
                rows.append(PageSnapshot(
                    job_id=job.job_id,
                    page_number=page_number,
                    frame_id=frame_id,
                    resident=frame_id is not None,
                    modified=frame.modified if frame else False,
                    referenced=frame.referenced if frame else False,
                ))
        return rows

    def frame_snapshots(self) -> List[FrameSnapshot]:
        """Memory Map Table rows in frame order."""
        return [
            FrameSnapshot(
                frame_id=frame.frame_id,
                free=frame.free,
                owner_job_id=frame.owner_job_id,
                page_number=frame.page_number,
                last_access_time=frame.last_access_time,
            )
            for frame in self.frames
        ]

    def usage(self) -> MemoryUsage:
        """Aggregate frame usage."""
        free = self.free_frame_count()
        return MemoryUsage(
            total_frames=len(self.frames),
            used_frames=len(self.frames) - free,
            free_frames=free,
        )
