"""
Scenario runner - drives a whole scenario through the MemorySystem.

RUN MODES:
----------
static:
    1. allocate_random() every job in import order
    2. resolve each access without demand loading
demand:
    1. resolve each access with demand loading (faults bring pages in)
events:
    1. run the arrival/completion simulation
    2. resolve each access without demand loading against the final state

Every recoverable error (InsufficientMemory, OutOfBounds, PageNotLoaded,
InvalidMapping, UnknownJob) is kept as an OutcomeRecord and the run
carries on. Nothing here prints; visualizers render the RunResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pagesim.logging_config import get_logger
from pagesim.models.job import Job
from pagesim.models.snapshot import (
    FrameSnapshot,
    JobSnapshot,
    MemoryUsage,
    PageSnapshot,
)
from pagesim.simulator.faults import AccessType, OutcomeRecord, PagingError
from pagesim.simulator.memory import MemorySystem
from pagesim.simulator.replacement import ReplacementPolicy
from pagesim.simulator.resolver import Resolution
from pagesim.simulator.scheduler import DEFAULT_MAX_TICKS, SimulationResult


logger = get_logger(__name__)


@dataclass
class AccessRequest:
    """One address to resolve, with an optional policy switch before it."""

    job_id: int
    address: int
    access_type: AccessType = AccessType.READ
    policy: Optional[ReplacementPolicy] = None


@dataclass
class AllocationRecord:
    """Outcome of one static allocation attempt."""

    job_id: int
    success: bool
    frames: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "success": self.success,
            "frames": list(self.frames),
        }


@dataclass
class AccessRecord:
    """
    Outcome of one access request.

    Exactly one of `resolution` and `outcome` is set.
    """

    step: int
    request: AccessRequest
    policy: ReplacementPolicy
    resolution: Optional[Resolution] = None
    outcome: Optional[OutcomeRecord] = None

    @property
    def success(self) -> bool:
        return self.resolution is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "job_id": self.request.job_id,
            "address": self.request.address,
            "access_type": self.request.access_type.value,
            "policy": self.policy.value,
            "resolution": self.resolution.to_dict() if self.resolution else None,
            "outcome": self.outcome.to_dict() if self.outcome else None,
        }


@dataclass
class RunResult:
    """
    Complete result of a scenario run.

    Attributes:
        mode: static, demand or events.
        policy: Replacement policy active at the end of the run.
        allocations: Static allocation attempts (static mode).
        accesses: Access outcomes in request order.
        simulation: Event simulation result (events mode).
        outcomes: Every reported error, in order.
        jobs/pages/frames/usage: Final snapshots.
        clock: Final global clock.
    """

    mode: str
    policy: ReplacementPolicy
    allocations: List[AllocationRecord] = field(default_factory=list)
    accesses: List[AccessRecord] = field(default_factory=list)
    simulation: Optional[SimulationResult] = None
    outcomes: List[OutcomeRecord] = field(default_factory=list)
    jobs: List[JobSnapshot] = field(default_factory=list)
    pages: List[PageSnapshot] = field(default_factory=list)
    frames: List[FrameSnapshot] = field(default_factory=list)
    usage: Optional[MemoryUsage] = None
    clock: int = 0

    @property
    def total_faults(self) -> int:
        return sum(job.fault_count for job in self.jobs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "mode": self.mode,
            "policy": self.policy.value,
            "clock": self.clock,
            "total_faults": self.total_faults,
            "allocations": [a.to_dict() for a in self.allocations],
            "accesses": [a.to_dict() for a in self.accesses],
            "simulation": self.simulation.to_dict() if self.simulation else None,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "usage": self.usage.to_dict() if self.usage else None,
            "job_table": [j.to_dict() for j in self.jobs],
            "page_map_table": [p.to_dict() for p in self.pages],
            "memory_map_table": [f.to_dict() for f in self.frames],
        }


class ScenarioRunner:
    """
    Runs jobs and access requests against a MemorySystem.

    Usage:
        runner = ScenarioRunner(memory, mode="demand")
        runner.register_jobs(jobs)
        result = runner.run(requests)
    """

    def __init__(
        self,
        memory: MemorySystem,
        mode: str = "demand",
        max_ticks: int = DEFAULT_MAX_TICKS,
        tick_delay: float = 0.0
    ):
        """
        Initialize the runner.

        Args:
            memory: A configured memory system.
            mode: static, demand or events.
            max_ticks: Bound for the event simulation.
            tick_delay: Pacing between event ticks, in seconds.
        """
        if mode not in ("static", "demand", "events"):
            raise ValueError(f"Invalid mode: {mode}")
        self.memory = memory
        self.mode = mode
        self.max_ticks = max_ticks
        self.tick_delay = tick_delay
        self.outcomes: List[OutcomeRecord] = []

    def _report(self, error: PagingError) -> OutcomeRecord:
        record = error.to_record()
        self.outcomes.append(record)
        logger.warning("%s", error.message)
        return record

    def register_jobs(self, jobs: List[Job]) -> int:
        """Register jobs, reporting duplicates. Returns the number added."""
        added = 0
        for job in jobs:
            try:
                self.memory.add_job(job)
                added += 1
            except PagingError as e:
                self._report(e)
        return added

    def allocate_all(self) -> List[AllocationRecord]:
        """Static allocation of every registered job in order."""
        records = []
        for job in self.memory.jobs.values():
            try:
                frames = self.memory.allocate_random(job)
                records.append(AllocationRecord(job.job_id, True, frames))
            except PagingError as e:
                self._report(e)
                records.append(AllocationRecord(job.job_id, False))
        return records

    def access(self, step: int, request: AccessRequest) -> AccessRecord:
        """Resolve one request, switching policy first if asked to."""
        if request.policy is not None:
            self.memory.set_replacement_policy(request.policy)

        record = AccessRecord(step=step, request=request, policy=self.memory.policy)
        try:
            record.resolution = self.memory.resolve_address(
                request.job_id,
                request.address,
                demand=self.mode == "demand",
                access_type=request.access_type,
            )
        except PagingError as e:
            record.outcome = self._report(e)
        return record

    def run(self, requests: Optional[List[AccessRequest]] = None) -> RunResult:
        """
        Run the scenario.

        Args:
            requests: Addresses to resolve after the mode's setup phase.

        Returns:
            RunResult with outcomes and final snapshots.
        """
        result = RunResult(mode=self.mode, policy=self.memory.policy)

        if self.mode == "static":
            result.allocations = self.allocate_all()
        elif self.mode == "events":
            result.simulation = self.memory.run_event_simulation(
                max_ticks=self.max_ticks,
                tick_delay=self.tick_delay,
            )

        for step, request in enumerate(requests or [], start=1):
            result.accesses.append(self.access(step, request))

        result.policy = self.memory.policy
        result.outcomes = list(self.outcomes)
        result.jobs = self.memory.job_snapshots()
        result.pages = self.memory.page_snapshots()
        result.frames = self.memory.frame_snapshots()
        result.usage = self.memory.usage()
        result.clock = self.memory.clock
        return result
