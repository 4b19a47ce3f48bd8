"""Data models for jobs, frames and memory snapshots."""

from pagesim.models.job import (
    Job,
    divide_into_pages,
    default_duration,
)
from pagesim.models.frame import Frame
from pagesim.models.snapshot import (
    JobSnapshot,
    PageSnapshot,
    FrameSnapshot,
    MemoryUsage,
)

__all__ = [
    "Job",
    "divide_into_pages",
    "default_duration",
    "Frame",
    "JobSnapshot",
    "PageSnapshot",
    "FrameSnapshot",
    "MemoryUsage",
]
