"""
Error models for the paging simulator.

ERROR TAXONOMY:
---------------
InvalidConfig:
    Non-positive frame count, frame size or page size, or a negative job
    size. Raised before any state is mutated.

InsufficientMemory:
    A static allocation needs more free frames than exist. The
    allocation is aborted and memory is left unchanged; the caller may
    retry later or put the job on a waiting queue.

OutOfBounds:
    A logical address outside [0, job size). No fault is counted and no
    state changes.

PageNotLoaded:
    Static resolution of a page that is not resident. No implicit load
    is performed.

InvalidMapping:
    A page table entry names a frame outside the frame table, or the
    offset does not fit in the frame. This is an integrity check and
    indicates a logic error rather than a normal outcome.

UnparseableRecord:
    A job import line whose ID or size is not an integer. The record is
    skipped and import continues.

Only configuration errors and an empty job set abort a run. Everything
else is reported as an OutcomeRecord and the run continues.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class OutcomeKind(Enum):
    """Kinds of reported (non-fatal) outcomes."""

    INVALID_CONFIG = auto()
    INSUFFICIENT_MEMORY = auto()
    OUT_OF_BOUNDS = auto()
    PAGE_NOT_LOADED = auto()
    INVALID_MAPPING = auto()
    UNPARSEABLE_RECORD = auto()
    UNKNOWN_JOB = auto()
    DUPLICATE_JOB = auto()


class AccessType(Enum):
    """Type of memory access being performed."""

    READ = "READ"
    WRITE = "WRITE"


@dataclass
class PagingError(Exception):
    """
    Base class for all simulator errors.

    Attributes:
        message: Human-readable description.
    """

    message: str = ""

    kind = OutcomeKind.INVALID_CONFIG

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    @property
    def job_id(self) -> Optional[int]:
        return None

    def to_record(self) -> OutcomeRecord:
        """Convert to a non-exception record for reporting."""
        return OutcomeRecord(kind=self.kind, message=self.message, job_id=self.job_id)


@dataclass
class InvalidConfig(PagingError, ValueError):
    """Rejected configuration parameter."""

    parameter: str = ""
    value: int = 0

    kind = OutcomeKind.INVALID_CONFIG

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"{self.parameter} must be positive, got {self.value}"


@dataclass
class InsufficientMemory(PagingError):
    """
    Not enough free frames for a static allocation.

    Attributes:
        job: The job that could not be placed.
        required: Frames needed.
        available: Free frames at the time of the attempt.
    """

    job: Optional[int] = None
    required: int = 0
    available: int = 0

    kind = OutcomeKind.INSUFFICIENT_MEMORY

    def __post_init__(self) -> None:
        if not self.message:
            self.message = (
                f"Job {self.job} needs {self.required} frames, "
                f"only {self.available} free"
            )

    @property
    def job_id(self) -> Optional[int]:
        return self.job


@dataclass
class OutOfBounds(PagingError):
    """Logical address outside the job's address space."""

    job: Optional[int] = None
    address: int = 0
    limit: int = 0

    kind = OutcomeKind.OUT_OF_BOUNDS

    def __post_init__(self) -> None:
        if not self.message:
            self.message = (
                f"Logical address {self.address} out of bounds for Job {self.job} "
                f"(valid: 0 - {self.limit - 1})"
            )

    @property
    def job_id(self) -> Optional[int]:
        return self.job


@dataclass
class PageNotLoaded(PagingError):
    """Static resolution hit a page that is not resident."""

    job: Optional[int] = None
    page_number: int = 0

    kind = OutcomeKind.PAGE_NOT_LOADED

    def __post_init__(self) -> None:
        if not self.message:
            self.message = (
                f"Page {self.page_number} not loaded in memory for Job {self.job}"
            )

    @property
    def job_id(self) -> Optional[int]:
        return self.job


@dataclass
class InvalidMapping(PagingError):
    """
    Page table entry that cannot produce a valid physical address.

    Attributes:
        job: Owning job.
        page_number: The page being resolved.
        frame_id: Frame named by the page table.
        offset: Offset within the page.
        frame_size: Size of the named frame (0 if out of range).
    """

    job: Optional[int] = None
    page_number: int = 0
    frame_id: int = 0
    offset: int = 0
    frame_size: int = 0

    kind = OutcomeKind.INVALID_MAPPING

    def __post_init__(self) -> None:
        if not self.message:
            self.message = (
                f"Invalid mapping for Job {self.job} page {self.page_number}: "
                f"frame {self.frame_id}, offset {self.offset}, "
                f"frame size {self.frame_size}"
            )

    @property
    def job_id(self) -> Optional[int]:
        return self.job


@dataclass
class UnparseableRecord(PagingError):
    """Malformed job import line."""

    line_number: int = 0
    line: str = ""
    reason: str = ""

    kind = OutcomeKind.UNPARSEABLE_RECORD

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Line {self.line_number}: {self.reason} ({self.line!r})"


@dataclass
class UnknownJob(PagingError):
    """No job registered under the given ID."""

    job: Optional[int] = None

    kind = OutcomeKind.UNKNOWN_JOB

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Job ID {self.job} not found"

    @property
    def job_id(self) -> Optional[int]:
        return self.job


@dataclass
class DuplicateJob(PagingError):
    """A job with the same ID is already registered."""

    job: Optional[int] = None

    kind = OutcomeKind.DUPLICATE_JOB

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Job ID {self.job} already registered"

    @property
    def job_id(self) -> Optional[int]:
        return self.job


@dataclass
class OutcomeRecord:
    """
    Record of a reported error.

    This is a non-exception class used to keep recoverable errors in
    the run result without raising.
    """

    kind: OutcomeKind
    message: str
    job_id: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.name,
            "message": self.message,
            "job_id": self.job_id,
        }
