"""
Terminal-based visualizer using Rich library.

This module renders the classic paging tables in the terminal:
- Job Table (size, pages, loaded pages, faults, fragmentation)
- Page Map Table (page -> frame, residency, status bits)
- Memory Map Table (frame occupancy and access time)
- Access results and the event-driven timeline
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.markup import escape

from pagesim.visualizer.base import BaseVisualizer
from pagesim.simulator.runner import RunResult
from pagesim.simulator.scheduler import SimulationResult
from pagesim.io.parser import ScenarioConfig


class TerminalVisualizer(BaseVisualizer):
    """
    Rich terminal visualizer for paging runs.

    Produces colorful, structured output including:
    - Header with mode, policy and usage
    - Job, Page Map and Memory Map tables
    - Access results (hit/fault/eviction)
    - Event timeline (events mode)
    - Reported errors (if any)
    """

    def __init__(
        self,
        config: Optional[ScenarioConfig] = None,
        console: Optional[Console] = None
    ):
        """
        Initialize the terminal visualizer.

        Args:
            config: Scenario configuration.
            console: Rich Console instance (creates new if None).
        """
        super().__init__(config)
        self.console = console or Console()

    def visualize(self, result: RunResult) -> None:
        """
        Display the run result in the terminal.

        Args:
            result: The run result to visualize.
        """
        self._print_header(result)

        if result.allocations:
            self._print_allocations(result)

        if result.simulation:
            self._print_timeline(result.simulation)

        if result.accesses:
            self._print_accesses(result)

        self.print_job_table(result)
        self.print_page_map(result)
        self.print_memory_map(result)

        if result.outcomes:
            self._print_outcomes(result)

    def save(self, result: RunResult, output_path: Path) -> None:
        """
        Save terminal output to a file.

        Args:
            result: The run result.
            output_path: Path to save output (as text).
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            old_console = self.console
            self.console = Console(file=f, width=120)
            try:
                self.visualize(result)
            finally:
                self.console = old_console

    def _print_header(self, result: RunResult) -> None:
        """Print the header panel."""
        header_text = "[bold cyan]Paged Memory Allocation Simulator[/]\n"
        header_text += f"[dim]Scenario: {escape(self.scenario_name)}[/]"
        if self.description:
            header_text += f"\n[dim]{escape(self.description)}[/]"
        header_text += "\n" + "  ".join(
            f"{label}: [yellow]{value}[/]" for label, value in self.status_items(result)
        )

        self.console.print(Panel(header_text, box=box.DOUBLE))

    def print_job_table(self, result: RunResult) -> None:
        """Print the Job Table."""
        table = Table(title="Job Table", box=box.ROUNDED)
        table.add_column("Job ID", style="cyan")
        table.add_column("Job Size", justify="right")
        table.add_column("No. of Pages", justify="right")
        table.add_column("Pages Loaded", justify="right", style="green")
        table.add_column("Page Faults", justify="right", style="red")
        table.add_column("Internal Fragmentation", justify="right", style="yellow")

        for job in result.jobs:
            table.add_row(
                str(job.job_id),
                str(job.size),
                str(job.page_count),
                str(job.loaded_page_count),
                str(job.fault_count),
                str(job.internal_fragmentation),
            )

        self.console.print(table)

    def print_page_map(self, result: RunResult) -> None:
        """Print the Page Map Table."""
        table = Table(title="Page Map Table", box=box.ROUNDED)
        table.add_column("Job ID", style="cyan")
        table.add_column("Page Number", justify="right")
        table.add_column("Frame Number", justify="right", style="yellow")
        table.add_column("Status")
        table.add_column("Referenced", justify="center")
        table.add_column("Modified", justify="center")

        def _bit(val: bool) -> str:
            return "[green]1[/]" if val else "[dim]0[/]"

        for page in result.pages:
            if page.resident:
                status = "[green]Loaded[/]"
                frame = str(page.frame_id)
            else:
                status = "[dim]Not Loaded[/]"
                frame = "-"
            table.add_row(
                str(page.job_id),
                str(page.page_number),
                frame,
                status,
                _bit(page.referenced),
                _bit(page.modified),
            )

        self.console.print(table)

    def print_memory_map(self, result: RunResult) -> None:
        """Print the Memory Map Table with a usage footer."""
        usage = result.usage
        caption = None
        if usage:
            caption = (
                f"{usage.used_frames}/{usage.total_frames} frames used "
                f"({usage.usage_percent:.1f}%)"
            )

        table = Table(title="Memory Map Table", caption=caption, box=box.ROUNDED)
        table.add_column("Frame Number", style="cyan")
        table.add_column("Status")
        table.add_column("Job ID", justify="right")
        table.add_column("Page Number", justify="right")
        table.add_column("Access Time", justify="right", style="dim")

        for frame in result.frames:
            if frame.free:
                table.add_row(str(frame.frame_id), "[green]Free[/]", "-", "-", "-")
            else:
                table.add_row(
                    str(frame.frame_id),
                    "[red]Occupied[/]",
                    str(frame.owner_job_id),
                    str(frame.page_number),
                    str(frame.last_access_time),
                )

        self.console.print(table)

    def _print_allocations(self, result: RunResult) -> None:
        """Print static allocation results."""
        table = Table(title="Static Allocation", box=box.ROUNDED)
        table.add_column("Job ID", style="cyan")
        table.add_column("Result")
        table.add_column("Frames", style="yellow")

        for record in result.allocations:
            if record.success:
                table.add_row(
                    str(record.job_id),
                    "[green]✓ Allocated[/]",
                    ", ".join(str(f) for f in record.frames) or "-",
                )
            else:
                table.add_row(str(record.job_id), "[red]✗ Not enough frames[/]", "-")

        self.console.print(table)

    def _print_accesses(self, result: RunResult) -> None:
        """Print the address resolution results."""
        table = Table(title="Address Resolution", box=box.ROUNDED)
        table.add_column("#", style="dim", width=4)
        table.add_column("Job", style="cyan")
        table.add_column("Logical", justify="right")
        table.add_column("Page", justify="right")
        table.add_column("Offset", justify="right")
        table.add_column("Frame", justify="right", style="yellow")
        table.add_column("Physical", justify="right", style="green")
        table.add_column("Result")

        for record in result.accesses:
            request = record.request
            r = record.resolution
            if r is None:
                table.add_row(
                    str(record.step),
                    str(request.job_id),
                    str(request.address),
                    "-", "-", "-", "-",
                    f"[red]{record.outcome.kind.name}[/]",
                )
                continue

            if r.access is None:
                status = "[blue]RESIDENT[/]"
            elif r.access.hit:
                status = "[green]HIT[/]"
            elif r.access.evicted:
                status = (
                    f"[bold yellow]FAULT[/] evicted J{r.access.evicted_job_id}"
                    f"/P{r.access.evicted_page_number} ({record.policy.value})"
                )
            else:
                status = "[yellow]FAULT[/]"

            table.add_row(
                str(record.step),
                str(r.job_id),
                str(r.logical_address),
                str(r.page_number),
                str(r.offset),
                str(r.frame_id),
                str(r.physical_address),
                status,
            )

        self.console.print(table)

    def _print_timeline(self, simulation: SimulationResult) -> None:
        """Print the event-driven timeline."""
        status = "timed out" if simulation.timed_out else "finished"
        table = Table(
            title=f"Event Timeline ({status} at t={simulation.final_time})",
            box=box.ROUNDED
        )
        table.add_column("t", style="dim", justify="right")
        table.add_column("Event", style="bold")
        table.add_column("Job", style="cyan")
        table.add_column("Detail")

        styles = {
            "ARRIVAL": "blue",
            "ALLOCATED": "green",
            "ALLOCATED_FROM_QUEUE": "green",
            "WAITING": "yellow",
            "COMPLETE": "magenta",
        }
        for entry in simulation.timeline:
            style = styles.get(entry.action, "white")
            table.add_row(
                str(entry.time),
                f"[{style}]{entry.action}[/]",
                str(entry.job_id),
                escape(entry.detail),
            )

        self.console.print(table)

        if simulation.waiting:
            self.console.print(
                f"[yellow]Still waiting:[/] {', '.join(str(j) for j in simulation.waiting)}"
            )

    def _print_outcomes(self, result: RunResult) -> None:
        """Print reported errors."""
        lines = [
            f"[bold red]{o.kind.name}[/] {escape(o.message)}" for o in result.outcomes
        ]
        self.console.print(Panel(
            "\n".join(lines),
            title="[red]Reported Errors[/]",
            border_style="red",
            box=box.ROUNDED
        ))
