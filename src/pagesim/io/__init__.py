"""Input/Output handling for scenario files, job CSVs and run results."""

from pagesim.io.parser import parse_scenario, import_jobs_csv, ScenarioConfig
from pagesim.io.formatter import format_output, RunOutput

__all__ = [
    "parse_scenario",
    "import_jobs_csv",
    "ScenarioConfig",
    "format_output",
    "RunOutput",
]
