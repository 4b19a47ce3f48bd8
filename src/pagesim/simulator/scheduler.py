"""
Discrete-event scheduler for job arrivals and completions.

Jobs arrive at their arrival_time and are placed with static random
allocation. A job that does not fit waits in a FIFO queue until some
other job completes and frees its frames.

EVENT ORDER:
------------
Events sit in a min-heap ordered by (time, kind, sequence):
- earlier time first
- ARRIVAL before COMPLETION at the same time
- insertion order among otherwise equal events

TICK LOOP:
----------
    t = 0
    while events or waiting jobs remain:
        process every event with time <= t
        record memory usage for tick t
        t += 1
        stop if t > max_ticks

Arrival:    allocate, schedule COMPLETION at t + duration, or enqueue.
Completion: free the job's frames, then retry every waiting job once in
            FIFO order; jobs that still do not fit go to the back.

The tick delay is cosmetic pacing for a human watching the output.
"""

from __future__ import annotations

import heapq
import time
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Deque, Dict, List

from pagesim.logging_config import get_logger
from pagesim.simulator.faults import InsufficientMemory

if TYPE_CHECKING:
    from pagesim.models.job import Job
    from pagesim.simulator.memory import MemorySystem


logger = get_logger(__name__)

DEFAULT_MAX_TICKS = 100


class EventKind(IntEnum):
    """Event kinds; the value is the tie-break rank at equal times."""

    ARRIVAL = 0
    COMPLETION = 1


@dataclass(order=True)
class Event:
    """A scheduled event, heap-ordered by (time, kind, sequence)."""

    time: int
    kind: EventKind
    sequence: int
    job_id: int = field(compare=False)


@dataclass
class TimelineEntry:
    """
    One line of the simulation timeline.

    Attributes:
        time: Tick the action happened at.
        action: ARRIVAL, ALLOCATED, WAITING, COMPLETE or ALLOCATED_FROM_QUEUE.
        job_id: Job concerned.
        detail: Human-readable detail.
    """

    time: int
    action: str
    job_id: int
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "action": self.action,
            "job_id": self.job_id,
            "detail": self.detail,
        }


@dataclass
class TickRecord:
    """Memory usage at the end of one tick."""

    time: int
    used_frames: int
    total_frames: int
    waiting: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "used_frames": self.used_frames,
            "total_frames": self.total_frames,
            "waiting": list(self.waiting),
        }


@dataclass
class SimulationResult:
    """
    Outcome of an event-driven run.

    Attributes:
        final_time: Tick at which the loop stopped.
        timed_out: True if max_ticks was reached with work remaining.
        timeline: Chronological actions.
        ticks: Per-tick memory usage.
        completed: Job IDs in completion order.
        waiting: Job IDs still waiting at the end.
    """

    final_time: int = 0
    timed_out: bool = False
    timeline: List[TimelineEntry] = field(default_factory=list)
    ticks: List[TickRecord] = field(default_factory=list)
    completed: List[int] = field(default_factory=list)
    waiting: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "final_time": self.final_time,
            "timed_out": self.timed_out,
            "completed": list(self.completed),
            "waiting": list(self.waiting),
            "timeline": [e.to_dict() for e in self.timeline],
            "ticks": [t.to_dict() for t in self.ticks],
        }


class EventScheduler:
    """
    Drives allocation and release of jobs over simulated time.

    Usage:
        scheduler = EventScheduler(memory)
        result = scheduler.run(max_ticks=100)

    Every job registered in the memory system gets an ARRIVAL event.
    """

    def __init__(self, memory: MemorySystem, tick_delay: float = 0.0):
        """
        Initialize the scheduler.

        Args:
            memory: Memory system holding frames and jobs.
            tick_delay: Seconds to sleep between ticks (pacing only).
        """
        self.memory = memory
        self.tick_delay = tick_delay
        self.events: List[Event] = []
        self.waiting: Deque[int] = deque()
        self.now = 0
        self._sequence = 0
        self._result = SimulationResult()

    def schedule(self, time: int, kind: EventKind, job_id: int) -> None:
        self._sequence += 1
        heapq.heappush(self.events, Event(time, kind, self._sequence, job_id))

    def run(self, max_ticks: int = DEFAULT_MAX_TICKS) -> SimulationResult:
        """
        Run the simulation.

        Args:
            max_ticks: Safety bound against jobs that can never fit.

        Returns:
            SimulationResult with the timeline and per-tick usage.
        """
        self.events = []
        self.waiting = deque()
        self.now = 0
        self._sequence = 0
        self._result = SimulationResult()

        for job in self.memory.jobs.values():
            self.schedule(job.arrival_time, EventKind.ARRIVAL, job.job_id)

        while self.events or self.waiting:
            while self.events and self.events[0].time <= self.now:
                event = heapq.heappop(self.events)
                if event.kind == EventKind.ARRIVAL:
                    self._on_arrival(event.job_id)
                else:
                    self._on_completion(event.job_id)

            usage = self.memory.usage()
            self._result.ticks.append(TickRecord(
                time=self.now,
                used_frames=usage.used_frames,
                total_frames=usage.total_frames,
                waiting=list(self.waiting),
            ))

            self.now += 1
            if self.now > max_ticks:
                self._result.timed_out = True
                logger.warning("Reached max_ticks=%d, stopping simulation", max_ticks)
                break
            if self.tick_delay:
                time.sleep(self.tick_delay)

        self._result.final_time = self.now
        self._result.waiting = list(self.waiting)
        return self._result

    def _try_allocate(self, job: Job) -> bool:
        try:
            self.memory.allocate_random(job)
        except InsufficientMemory as e:
            logger.info("%s", e.message)
            return False
        job.start_time = self.now
        self.schedule(self.now + job.duration, EventKind.COMPLETION, job.job_id)
        return True

    def _log(self, action: str, job_id: int, detail: str = "") -> None:
        self._result.timeline.append(TimelineEntry(self.now, action, job_id, detail))

    def _on_arrival(self, job_id: int) -> None:
        job = self.memory.get_job(job_id)
        self._log("ARRIVAL", job_id)

        if self._try_allocate(job):
            self._log(
                "ALLOCATED", job_id,
                f"will complete at t={self.now + job.duration}"
            )
        else:
            self.waiting.append(job_id)
            self._log("WAITING", job_id, "not enough frames")

    def _on_completion(self, job_id: int) -> None:
        self.memory.free_job_frames(job_id)
        self._result.completed.append(job_id)
        self._log("COMPLETE", job_id)

        for _ in range(len(self.waiting)):
            waiting_id = self.waiting.popleft()
            job = self.memory.get_job(waiting_id)
            if self._try_allocate(job):
                self._log(
                    "ALLOCATED_FROM_QUEUE", waiting_id,
                    f"will complete at t={self.now + job.duration}"
                )
            else:
                self.waiting.append(waiting_id)


def run_event_simulation(
    memory: MemorySystem,
    max_ticks: int = DEFAULT_MAX_TICKS,
    tick_delay: float = 0.0
) -> SimulationResult:
    """Run an event-driven simulation over every job in `memory`."""
    return EventScheduler(memory, tick_delay=tick_delay).run(max_ticks)
