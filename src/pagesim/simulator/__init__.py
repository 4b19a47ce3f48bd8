"""Core paging simulation: allocation, demand paging, resolution, scheduling."""

from pagesim.simulator.faults import (
    AccessType,
    PagingError,
    InvalidConfig,
    InsufficientMemory,
    OutOfBounds,
    PageNotLoaded,
    InvalidMapping,
    UnparseableRecord,
    UnknownJob,
    DuplicateJob,
)
from pagesim.simulator.replacement import ReplacementPolicy
from pagesim.simulator.memory import MemorySystem, PageAccess
from pagesim.simulator.resolver import Resolution
from pagesim.simulator.scheduler import EventScheduler, SimulationResult
from pagesim.simulator.runner import ScenarioRunner, RunResult, AccessRequest

__all__ = [
    "AccessType",
    "PagingError",
    "InvalidConfig",
    "InsufficientMemory",
    "OutOfBounds",
    "PageNotLoaded",
    "InvalidMapping",
    "UnparseableRecord",
    "UnknownJob",
    "DuplicateJob",
    "ReplacementPolicy",
    "MemorySystem",
    "PageAccess",
    "Resolution",
    "EventScheduler",
    "SimulationResult",
    "ScenarioRunner",
    "RunResult",
    "AccessRequest",
]
