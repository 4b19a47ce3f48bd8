"""
Input parser for scenario files and job CSV files.

A scenario JSON file describes the memory, the jobs and the accesses to
perform. Jobs may be listed inline, imported from a CSV file, or both.

INPUT FORMAT DOCUMENTATION:
===========================

{
    "scenario_name": "string",        // Identifier for this scenario
    "description": "string",          // Human-readable description

    "memory": {
        "frame_count": 10,            // Number of physical frames
        "frame_size": 512             // Frame (and page) size in bytes
    },

    "replacement_policy": "FIFO",     // FIFO or LRU
    "mode": "demand",                 // static, demand or events
    "seed": 42,                       // Optional RNG seed for placement

    "jobs_csv": "jobs.csv",           // Optional, relative to this file
    "jobs": [                         // Optional inline jobs
        {"job_id": 1, "size": 1000, "arrival_time": 0, "duration": 5}
    ],

    "accesses": [                     // Addresses to resolve, in order
        {"job_id": 1, "address": 700, "access_type": "READ"},
        {"job_id": 1, "address": 10, "policy": "LRU"}
    ],

    "simulation": {                   // Event-driven mode only
        "max_ticks": 100,
        "tick_delay_ms": 0
    }
}

CSV FORMAT:
===========

    jobID,jobSize[,arrival[,duration]]

- A first line that does not start with a digit is a header
- Blank lines are ignored
- A bad jobID or jobSize skips the line (UnparseableRecord)
- A bad arrival defaults to 0
- A bad or missing duration defaults to max(1, jobSize // 500)

FIELD EXPLANATIONS:
===================

mode:
    static - place every job at once with random allocation, then
             resolve accesses without loading pages
    demand - resolve accesses with demand paging (faults load pages)
    events - run the arrival/completion simulation, then resolve
             accesses against the final memory state

policy (per access):
    Switches the replacement policy before that access. The switch is
    not retroactive.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pagesim.logging_config import get_logger
from pagesim.models.job import Job, default_duration
from pagesim.simulator.faults import AccessType, InvalidConfig, UnparseableRecord
from pagesim.simulator.replacement import ReplacementPolicy
from pagesim.simulator.runner import AccessRequest


logger = get_logger(__name__)

MODES = ("static", "demand", "events")


class MemoryConfig(BaseModel):
    """Physical memory configuration."""

    frame_count: int = Field(default=10, gt=0, description="Number of frames")
    frame_size: int = Field(default=512, gt=0, description="Frame size in bytes")


class SimulationSettings(BaseModel):
    """Event-driven simulation settings."""

    max_ticks: int = Field(default=100, gt=0)
    tick_delay_ms: int = Field(default=0, ge=0)


class JobConfig(BaseModel):
    """Inline job definition."""

    job_id: int
    size: int = Field(ge=0)
    arrival_time: int = Field(default=0, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)


class AccessConfig(BaseModel):
    """One address to resolve."""

    job_id: int
    address: int
    access_type: str = Field(default="READ", description="READ/WRITE")
    policy: Optional[str] = Field(default=None, description="FIFO/LRU switch")

    @field_validator("access_type")
    @classmethod
    def validate_access_type(cls, v: str) -> str:
        """Validate access type."""
        v = v.upper()
        if v not in ("READ", "WRITE"):
            raise ValueError(f"Invalid access type: {v}")
        return v

    @field_validator("policy")
    @classmethod
    def validate_policy(cls, v: Optional[str]) -> Optional[str]:
        """Validate policy switch."""
        if v is None:
            return v
        v = v.upper()
        if v not in ("FIFO", "LRU"):
            raise ValueError(f"Invalid replacement policy: {v}")
        return v


class ScenarioConfig(BaseModel):
    """Complete scenario configuration."""

    scenario_name: str = Field(default="unnamed")
    description: str = Field(default="")
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    replacement_policy: str = Field(default="FIFO")
    mode: str = Field(default="demand")
    seed: Optional[int] = Field(default=None)
    jobs_csv: Optional[str] = Field(default=None)
    jobs: List[JobConfig] = Field(default_factory=list)
    accesses: List[AccessConfig] = Field(default_factory=list)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    source_file: Optional[str] = Field(default=None, description="Path to source JSON file")

    @field_validator("replacement_policy")
    @classmethod
    def validate_policy(cls, v: str) -> str:
        """Validate replacement policy."""
        v = v.upper()
        if v not in ("FIFO", "LRU"):
            raise ValueError(f"Invalid replacement policy: {v}. Must be FIFO or LRU.")
        return v

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Validate run mode."""
        v = v.lower()
        if v not in MODES:
            raise ValueError(f"Invalid mode: {v}. Must be one of {', '.join(MODES)}.")
        return v

    def jobs_csv_path(self) -> Optional[Path]:
        """Resolve jobs_csv relative to the scenario file."""
        if not self.jobs_csv:
            return None
        path = Path(self.jobs_csv)
        if not path.is_absolute() and self.source_file:
            path = Path(self.source_file).parent / path
        return path


@dataclass
class ImportResult:
    """Jobs imported from a CSV file plus the records that were skipped."""

    jobs: List[Job] = field(default_factory=list)
    skipped: List[UnparseableRecord] = field(default_factory=list)


def parse_scenario(file_path: str | Path) -> ScenarioConfig:
    """
    Parse a scenario configuration file.

    Args:
        file_path: Path to JSON configuration file.

    Returns:
        Parsed ScenarioConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If configuration is invalid.
    """
    path = Path(file_path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = ScenarioConfig.model_validate(data)
    config.source_file = str(path)
    return config


def _parse_int(token: str) -> int:
    return int(token.strip())


def parse_job_row(
    row: List[str],
    page_size: int,
    line_number: int = 0
) -> Job:
    """
    Build a Job from one CSV row.

    Raises:
        UnparseableRecord: If the ID or size is missing or not an integer,
            or the size is negative.
    """
    line = ",".join(row)
    if len(row) < 2:
        raise UnparseableRecord(line_number=line_number, line=line, reason="missing jobSize")

    try:
        job_id = _parse_int(row[0])
    except ValueError:
        raise UnparseableRecord(
            line_number=line_number, line=line, reason="jobID is not an integer"
        ) from None
    try:
        size = _parse_int(row[1])
    except ValueError:
        raise UnparseableRecord(
            line_number=line_number, line=line, reason="jobSize is not an integer"
        ) from None
    if size < 0:
        raise UnparseableRecord(line_number=line_number, line=line, reason="negative jobSize")

    arrival = 0
    if len(row) > 2:
        try:
            arrival = max(0, _parse_int(row[2]))
        except ValueError:
            arrival = 0

    duration = default_duration(size)
    if len(row) > 3:
        try:
            parsed = _parse_int(row[3])
        except ValueError:
            parsed = 0
        if parsed > 0:
            duration = parsed

    return Job.create(job_id, size, page_size, arrival_time=arrival, duration=duration)


def import_jobs_csv(file_path: str | Path, page_size: int) -> ImportResult:
    """
    Import jobs from a CSV file.

    Malformed records are skipped and reported; they never abort the
    import.

    Args:
        file_path: Path to the CSV file.
        page_size: Page size to divide jobs with.

    Returns:
        ImportResult with jobs in file order and skipped records.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        InvalidConfig: If page_size is not positive.
    """
    if page_size <= 0:
        raise InvalidConfig(parameter="page_size", value=page_size)

    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    result = ImportResult()
    seen = set()
    first = True

    with open(path, "r", newline="") as f:
        for line_number, row in enumerate(csv.reader(f), start=1):
            if not row or not "".join(row).strip():
                continue

            if first:
                first = False
                head = row[0].strip()
                if head and not head[0].isdigit():
                    continue

            try:
                job = parse_job_row(row, page_size, line_number)
                if job.job_id in seen:
                    raise UnparseableRecord(
                        line_number=line_number,
                        line=",".join(row),
                        reason=f"duplicate jobID {job.job_id}",
                    )
            except UnparseableRecord as e:
                logger.warning("Skipping record: %s", e.message)
                result.skipped.append(e)
                continue

            seen.add(job.job_id)
            result.jobs.append(job)

    logger.info(
        "Imported %d jobs from %s (%d skipped)",
        len(result.jobs), path, len(result.skipped)
    )
    return result


def build_jobs(config: ScenarioConfig, csv_path: Optional[Path] = None) -> ImportResult:
    """
    Collect the scenario's jobs: CSV rows first, then inline jobs.

    Inline jobs whose ID was already imported are reported as skipped.

    Args:
        config: Parsed scenario configuration.
        csv_path: Overrides config.jobs_csv when given.

    Returns:
        ImportResult with every job to register.
    """
    page_size = config.memory.frame_size
    path = csv_path or config.jobs_csv_path()

    result = import_jobs_csv(path, page_size) if path else ImportResult()
    seen = {job.job_id for job in result.jobs}

    for index, spec in enumerate(config.jobs):
        if spec.job_id in seen:
            record = UnparseableRecord(
                line_number=index + 1,
                line=spec.model_dump_json(),
                reason=f"duplicate jobID {spec.job_id}",
            )
            logger.warning("Skipping inline job: %s", record.message)
            result.skipped.append(record)
            continue
        seen.add(spec.job_id)
        result.jobs.append(Job.create(
            spec.job_id,
            spec.size,
            page_size,
            arrival_time=spec.arrival_time,
            duration=spec.duration,
        ))

    return result


def build_requests(config: ScenarioConfig) -> List[AccessRequest]:
    """Convert the scenario's access list into runner requests."""
    return [
        AccessRequest(
            job_id=a.job_id,
            address=a.address,
            access_type=AccessType[a.access_type],
            policy=ReplacementPolicy.parse(a.policy) if a.policy else None,
        )
        for a in config.accesses
    ]
