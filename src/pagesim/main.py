"""
Command-line interface for pagesim.

Usage:
    pagesim <scenario.json> [--output <dir>] [--format terminal|html|both|json|summary]
    pagesim --help

Examples:
    # Demand paging with terminal tables
    pagesim examples/demand_fifo.json

    # Same scenario under LRU, with every fault logged
    pagesim examples/demand_fifo.json --policy LRU -vv

    # Event-driven run, jobs from a CSV file, HTML report
    pagesim examples/events.json --jobs jobs.csv --format html --output results/
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pagesim.logging_config import get_logger, setup_logging
from pagesim.io.parser import (
    MODES,
    ScenarioConfig,
    build_jobs,
    build_requests,
    parse_scenario,
)
from pagesim.io.formatter import format_output, generate_summary, save_output
from pagesim.simulator.faults import PagingError
from pagesim.simulator.memory import MemorySystem
from pagesim.simulator.replacement import ReplacementPolicy
from pagesim.simulator.runner import RunResult, ScenarioRunner
from pagesim.visualizer.terminal import TerminalVisualizer
from pagesim.visualizer.html import HTMLVisualizer


logger = get_logger(__name__)


class EmptyJobSet(PagingError):
    """No job survived import."""


def apply_overrides(config: ScenarioConfig, args: argparse.Namespace) -> ScenarioConfig:
    """Apply command-line overrides to the parsed scenario."""
    updates = {}
    if args.mode:
        updates["mode"] = args.mode
    if args.policy:
        updates["replacement_policy"] = args.policy.upper()
    if args.seed is not None:
        updates["seed"] = args.seed
    if args.max_ticks is not None:
        updates["simulation"] = config.simulation.model_copy(
            update={"max_ticks": args.max_ticks}
        )
    return config.model_copy(update=updates)


def run_simulation(
    config: ScenarioConfig,
    jobs_csv: Optional[Path] = None
) -> tuple:
    """
    Run a simulation from a parsed scenario.

    Args:
        config: Scenario configuration.
        jobs_csv: Optional CSV file overriding config.jobs_csv.

    Returns:
        Tuple of (result, skipped import records).

    Raises:
        InvalidConfig: If memory parameters are not positive.
        EmptyJobSet: If no job could be imported.
    """
    imported = build_jobs(config, jobs_csv)
    if not imported.jobs:
        raise EmptyJobSet(message="No jobs loaded. Provide jobs inline or via a CSV file "
                                  "with lines like: jobID,jobSize,arrival,duration")

    memory = MemorySystem(
        frame_count=config.memory.frame_count,
        frame_size=config.memory.frame_size,
        policy=ReplacementPolicy.parse(config.replacement_policy),
        seed=config.seed,
    )

    runner = ScenarioRunner(
        memory,
        mode=config.mode,
        max_ticks=config.simulation.max_ticks,
        tick_delay=config.simulation.tick_delay_ms / 1000,
    )
    runner.register_jobs(imported.jobs)
    result = runner.run(build_requests(config))

    skipped = [record.to_record() for record in imported.skipped]
    return result, skipped


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagesim",
        description="Paged Memory Allocation Simulator (static, demand and event-driven)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s examples/demand_fifo.json
  %(prog)s examples/demand_fifo.json --policy LRU -vv
  %(prog)s examples/events.json --jobs jobs.csv --format html --output results/
        """
    )

    parser.add_argument(
        "scenario",
        type=Path,
        help="Path to scenario JSON file"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("results"),
        help="Output directory for results (default: results/)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=["terminal", "html", "both", "json", "summary"],
        default="terminal",
        help="Output format (default: terminal)"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress terminal output (useful with --format json)"
    )

    parser.add_argument(
        "--mode",
        choices=MODES,
        help="Override the scenario's run mode"
    )

    parser.add_argument(
        "--policy",
        choices=["FIFO", "LRU", "fifo", "lru"],
        help="Override the initial replacement policy"
    )

    parser.add_argument(
        "--jobs",
        type=Path,
        help="Job CSV file (jobID,jobSize[,arrival[,duration]])"
    )

    parser.add_argument(
        "--max-ticks",
        type=int,
        help="Safety bound for the event-driven simulation"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for random frame placement"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )

    return parser


def emit(result: RunResult, config: ScenarioConfig, skipped: list, args: argparse.Namespace) -> None:
    """Write the result in the requested formats."""
    output = format_output(result, config, skipped)

    show_terminal = args.format in ("terminal", "both") and not args.quiet
    save_html = args.format in ("html", "both")
    save_json = args.format in ("json", "both")

    if show_terminal:
        TerminalVisualizer(config).visualize(result)

    if args.format == "summary" and not args.quiet:
        print(generate_summary(result))

    if save_html:
        html = HTMLVisualizer(config)
        html_path = html.output_path(args.output)
        html.save(result, html_path)
        if not args.quiet:
            print(f"\nHTML saved to: {html_path}")

    if save_json:
        json_path = args.output / f"{config.scenario_name}.json"
        save_output(output, json_path)
        if not args.quiet:
            print(f"JSON saved to: {json_path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if not args.scenario.exists():
        print(f"Error: Scenario file not found: {args.scenario}", file=sys.stderr)
        return 1

    try:
        config = apply_overrides(parse_scenario(args.scenario), args)
        result, skipped = run_simulation(config, args.jobs)
        emit(result, config, skipped, args)
        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except PagingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
