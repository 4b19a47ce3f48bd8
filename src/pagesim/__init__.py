"""
Paged Memory Allocation Simulator.

This package models dividing jobs into fixed-size pages, placing those
pages in physical frames, resolving logical addresses to physical ones,
and demand paging with FIFO or LRU replacement. An event-driven mode
schedules job arrivals and completions over simulated time.

Modules:
    models: Jobs, frames and read-only snapshots
    simulator: Memory system, replacement, resolution and scheduling
    io: Scenario/CSV parsing and JSON output
    visualizer: Terminal and HTML visualization
"""

__version__ = "0.1.0"
__author__ = "pagesim Contributors"

from pagesim.simulator.memory import MemorySystem
from pagesim.io.parser import parse_scenario
from pagesim.io.formatter import format_output

__all__ = [
    "MemorySystem",
    "parse_scenario",
    "format_output",
]
