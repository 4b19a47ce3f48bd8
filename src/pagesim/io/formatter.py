"""
Output formatter for run results.

This module wraps a RunResult with scenario metadata and produces
structured JSON suitable for visualization and analysis.

OUTPUT FORMAT:
==============
{
    "scenario_name": "string",
    "description": "string",
    "timestamp": "ISO-8601",
    "input": {
        "frame_count": 10,
        "frame_size": 512,
        "mode": "static/demand/events",
        "replacement_policy": "FIFO/LRU",
        "job_count": 4,
        "skipped_records": [ ... ]
    },
    "result": {
        "mode": "...",
        "policy": "...",          // Active at the end of the run
        "clock": 12,
        "total_faults": 7,
        "allocations": [ ... ],   // Static mode
        "accesses": [ ... ],      // One entry per resolved address
        "simulation": { ... },    // Events mode
        "outcomes": [ ... ],      // Reported errors
        "usage": { ... },
        "job_table": [ ... ],
        "page_map_table": [ ... ],
        "memory_map_table": [ ... ]
    }
}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from pagesim.io.parser import ScenarioConfig
from pagesim.simulator.faults import OutcomeRecord
from pagesim.simulator.runner import RunResult


@dataclass
class RunOutput:
    """
    Formatted output for a scenario run.

    This wraps the RunResult with scenario metadata for output.
    """

    scenario_name: str
    description: str
    timestamp: str
    input_config: Dict[str, Any]
    result: RunResult
    skipped: List[OutcomeRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        input_config = dict(self.input_config)
        input_config["skipped_records"] = [s.to_dict() for s in self.skipped]
        return {
            "scenario_name": self.scenario_name,
            "description": self.description,
            "timestamp": self.timestamp,
            "input": input_config,
            "result": self.result.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to formatted JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def format_output(
    result: RunResult,
    config: ScenarioConfig,
    skipped: List[OutcomeRecord] | None = None
) -> RunOutput:
    """
    Format a RunResult with scenario metadata.

    Args:
        result: The run result to format.
        config: The scenario configuration.
        skipped: Import records that were skipped.

    Returns:
        Formatted RunOutput.
    """
    input_config = {
        "frame_count": config.memory.frame_count,
        "frame_size": config.memory.frame_size,
        "mode": result.mode,
        "replacement_policy": config.replacement_policy,
        "job_count": len(result.jobs),
    }

    return RunOutput(
        scenario_name=config.scenario_name,
        description=config.description,
        timestamp=datetime.now().isoformat(),
        input_config=input_config,
        result=result,
        skipped=list(skipped or []),
    )


def save_output(
    output: RunOutput,
    file_path: str | Path,
    pretty: bool = True
) -> None:
    """
    Save formatted output to a JSON file.

    Args:
        output: The formatted output.
        file_path: Destination file path.
        pretty: If True, format with indentation.
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    indent = 2 if pretty else None
    with open(path, "w") as f:
        json.dump(output.to_dict(), f, indent=indent)


def generate_summary(result: RunResult) -> str:
    """
    Generate a human-readable summary of the run.

    Args:
        result: The run result.

    Returns:
        Multi-line summary string.
    """
    lines = []

    lines.append("=" * 60)
    lines.append("PAGED MEMORY SIMULATION SUMMARY")
    lines.append("=" * 60)

    lines.append(f"Mode: {result.mode}   Policy: {result.policy.value}   Clock: {result.clock}")
    if result.usage:
        u = result.usage
        lines.append(
            f"Frames: {u.used_frames}/{u.total_frames} used "
            f"({u.usage_percent:.1f}%), {u.free_frames} free"
        )

    lines.append("-" * 60)

    for job in result.jobs:
        lines.append(
            f"Job {job.job_id}: {job.size} bytes, {job.page_count} pages, "
            f"{job.loaded_page_count} loaded, {job.fault_count} faults, "
            f"fragmentation {job.internal_fragmentation}"
        )

    if result.accesses:
        lines.append("-" * 60)
        for access in result.accesses:
            if access.resolution:
                r = access.resolution
                lines.append(
                    f"✓ Job {r.job_id} logical {r.logical_address} -> physical "
                    f"{r.physical_address} (page {r.page_number}, frame {r.frame_id}, "
                    f"offset {r.offset})"
                )
            else:
                lines.append(f"✗ {access.outcome.kind.name}: {access.outcome.message}")

    if result.simulation:
        sim = result.simulation
        lines.append("-" * 60)
        status = "timed out" if sim.timed_out else "finished"
        lines.append(f"Event simulation {status} at t={sim.final_time}")
        lines.append(f"  Completed: {sim.completed}")
        if sim.waiting:
            lines.append(f"  Still waiting: {sim.waiting}")

    lines.append("-" * 60)
    lines.append(f"Total Page Faults: {result.total_faults}")
    lines.append(f"Reported Errors: {len(result.outcomes)}")
    lines.append("=" * 60)

    return "\n".join(lines)
