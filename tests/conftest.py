"""Shared fixtures for pagesim tests."""

import pytest

from pagesim.models.job import Job
from pagesim.simulator.memory import MemorySystem
from pagesim.simulator.replacement import ReplacementPolicy

FRAME_SIZE = 512


@pytest.fixture
def memory() -> MemorySystem:
    """Ten free frames of 512 bytes with a fixed seed."""
    return MemorySystem(frame_count=10, frame_size=FRAME_SIZE, seed=7)


@pytest.fixture
def small_memory() -> MemorySystem:
    """Three frames, FIFO replacement."""
    return MemorySystem(frame_count=3, frame_size=FRAME_SIZE, seed=7)


@pytest.fixture
def make_job(memory):
    """Factory that creates and registers a job in the `memory` fixture."""

    def _make(job_id: int, size: int, **kwargs) -> Job:
        return memory.add_job(Job.create(job_id, size, memory.frame_size, **kwargs))

    return _make


def register(memory: MemorySystem, job_id: int, size: int, **kwargs) -> Job:
    """Create and register a job in an arbitrary memory system."""
    return memory.add_job(Job.create(job_id, size, memory.frame_size, **kwargs))


def lru_memory(frame_count: int) -> MemorySystem:
    return MemorySystem(
        frame_count=frame_count,
        frame_size=FRAME_SIZE,
        policy=ReplacementPolicy.LRU,
        seed=7,
    )
