"""
Read-only snapshots of memory state for display and output.

These are the records the visualizers and the JSON formatter consume.
They are built on demand by MemorySystem queries and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class JobSnapshot:
    """One row of the Job Table."""

    job_id: int
    size: int
    page_count: int
    loaded_page_count: int
    fault_count: int
    internal_fragmentation: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "size": self.size,
            "page_count": self.page_count,
            "loaded_page_count": self.loaded_page_count,
            "fault_count": self.fault_count,
            "internal_fragmentation": self.internal_fragmentation,
        }


@dataclass(frozen=True)
class PageSnapshot:
    """One row of the Page Map Table."""

    job_id: int
    page_number: int
    frame_id: Optional[int]
    resident: bool
    modified: bool
    referenced: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "page_number": self.page_number,
            "frame_id": self.frame_id,
            "resident": self.resident,
            "modified": self.modified,
            "referenced": self.referenced,
        }


@dataclass(frozen=True)
class FrameSnapshot:
    """One row of the Memory Map Table."""

    frame_id: int
    free: bool
    owner_job_id: Optional[int]
    page_number: Optional[int]
    last_access_time: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame_id": self.frame_id,
            "free": self.free,
            "owner_job_id": self.owner_job_id,
            "page_number": self.page_number,
            "last_access_time": self.last_access_time,
        }


@dataclass(frozen=True)
class MemoryUsage:
    """
    Aggregate frame usage.

    usage_percent is used_frames * 100 / total_frames, or 0.0 for an
    unconfigured (empty) frame table.
    """

    total_frames: int
    used_frames: int
    free_frames: int

    @property
    def usage_percent(self) -> float:
        if self.total_frames == 0:
            return 0.0
        return self.used_frames * 100 / self.total_frames

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_frames": self.total_frames,
            "used_frames": self.used_frames,
            "free_frames": self.free_frames,
            "usage_percent": round(self.usage_percent, 2),
        }
