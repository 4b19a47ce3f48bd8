"""Tests for the command-line interface."""

import json

import pytest

from pagesim.main import EmptyJobSet, main, run_simulation
from pagesim.io.parser import ScenarioConfig


SCENARIO = {
    "scenario_name": "cli_demo",
    "description": "Three frames, one five-page job",
    "memory": {"frame_count": 3, "frame_size": 512},
    "replacement_policy": "FIFO",
    "mode": "demand",
    "jobs": [{"job_id": 1, "size": 2560}],
    "accesses": [
        {"job_id": 1, "address": 512},
        {"job_id": 1, "address": 1024},
        {"job_id": 1, "address": 1536},
        {"job_id": 1, "address": 2048},
        {"job_id": 1, "address": 600},
        {"job_id": 1, "address": 9999},
    ],
}


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(SCENARIO))
    return path


class TestRunSimulation:

    def test_demand_run(self) -> None:
        result, skipped = run_simulation(ScenarioConfig.model_validate(SCENARIO))
        assert result.total_faults == 5
        assert len(result.outcomes) == 1
        assert skipped == []

    def test_empty_job_set(self) -> None:
        with pytest.raises(EmptyJobSet):
            run_simulation(ScenarioConfig())


class TestMain:

    def test_json_output(self, scenario_file, tmp_path, capsys) -> None:
        out_dir = tmp_path / "results"

        code = main([str(scenario_file), "-f", "json", "-q", "-o", str(out_dir)])

        assert code == 0
        assert capsys.readouterr().out == ""
        data = json.loads((out_dir / "cli_demo.json").read_text())
        assert data["scenario_name"] == "cli_demo"
        assert data["input"]["frame_count"] == 3
        assert data["result"]["total_faults"] == 5
        assert data["result"]["outcomes"][0]["kind"] == "OUT_OF_BOUNDS"

    def test_policy_override(self, scenario_file, tmp_path) -> None:
        out_dir = tmp_path / "results"
        main([str(scenario_file), "-f", "json", "-q", "-o", str(out_dir), "--policy", "lru"])
        data = json.loads((out_dir / "cli_demo.json").read_text())
        assert data["result"]["policy"] == "LRU"
        assert data["result"]["accesses"][0]["policy"] == "LRU"

    def test_html_output(self, scenario_file, tmp_path) -> None:
        out_dir = tmp_path / "results"
        assert main([str(scenario_file), "-f", "html", "-q", "-o", str(out_dir)]) == 0
        html = (out_dir / "cli_demo.html").read_text()
        assert "Paged Memory Allocation" in html
        assert "Memory Map Table" in html

    def test_summary(self, scenario_file, capsys) -> None:
        assert main([str(scenario_file), "-f", "summary"]) == 0
        out = capsys.readouterr().out
        assert "PAGED MEMORY SIMULATION SUMMARY" in out
        assert "Total Page Faults: 5" in out

    def test_terminal(self, scenario_file, capsys) -> None:
        assert main([str(scenario_file)]) == 0
        out = capsys.readouterr().out
        assert "Job Table" in out
        assert "Page Map Table" in out

    def test_static_mode_override(self, scenario_file, capsys) -> None:
        assert main([str(scenario_file), "-f", "summary", "--mode", "static", "--seed", "3"]) == 0
        assert "Total Page Faults: 0" in capsys.readouterr().out

    def test_jobs_csv(self, scenario_file, tmp_path, capsys) -> None:
        jobs = tmp_path / "jobs.csv"
        jobs.write_text("jobID,jobSize\n1,2560\nbad,1\n")
        assert main([str(scenario_file), "--jobs", str(jobs), "-f", "summary"]) == 0
        assert "Job 1: 2560 bytes, 5 pages" in capsys.readouterr().out

    def test_missing_scenario(self, tmp_path, capsys) -> None:
        assert main([str(tmp_path / "nope.json")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_empty_job_set(self, tmp_path, capsys) -> None:
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"scenario_name": "empty"}))
        assert main([str(path)]) == 1
        assert "No jobs loaded" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"memory": {"frame_count": 0}}))
        assert main([str(path)]) == 1
        assert "Configuration error" in capsys.readouterr().err
