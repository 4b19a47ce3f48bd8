"""
Base visualizer abstract class.

Both the terminal and HTML visualizers render a RunResult and can save
it to a file named after the scenario. The status line (mode, policy,
frame usage, faults) is computed here so both outputs agree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from pagesim.simulator.runner import RunResult
from pagesim.io.parser import ScenarioConfig


class BaseVisualizer(ABC):
    """
    Abstract base class for run visualizers.

    Subclasses set `extension` and implement visualize() and save().
    """

    extension = ".txt"

    def __init__(self, config: Optional[ScenarioConfig] = None):
        """
        Initialize the visualizer.

        Args:
            config: Optional scenario configuration for titles.
        """
        self.config = config

    @abstractmethod
    def visualize(self, result: RunResult) -> None:
        """Render a run result to stdout."""

    @abstractmethod
    def save(self, result: RunResult, output_path: Path) -> None:
        """Render a run result to `output_path`."""

    @property
    def scenario_name(self) -> str:
        return self.config.scenario_name if self.config else "unnamed"

    @property
    def description(self) -> str:
        return self.config.description if self.config else ""

    def output_path(self, directory: Path) -> Path:
        """Default report path for this scenario inside `directory`."""
        return directory / f"{self.scenario_name}{self.extension}"

    @staticmethod
    def status_items(result: RunResult) -> List[Tuple[str, str]]:
        """
        Label/value pairs for the report header.

        Returns:
            [("Mode", ...), ("Policy", ...), ("Frames", ...), ("Faults", ...), ("Clock", ...)]
        """
        items = [
            ("Mode", result.mode),
            ("Policy", result.policy.value),
        ]
        if result.usage:
            u = result.usage
            items.append((
                "Frames",
                f"{u.used_frames}/{u.total_frames} ({u.usage_percent:.1f}%)"
            ))
        items.append(("Faults", str(result.total_faults)))
        items.append(("Clock", str(result.clock)))
        return items
