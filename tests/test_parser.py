"""Tests for scenario parsing and job CSV import."""

import json

import pytest
from pydantic import ValidationError

from pagesim.io.parser import (
    ScenarioConfig,
    build_jobs,
    build_requests,
    import_jobs_csv,
    parse_job_row,
    parse_scenario,
)
from pagesim.simulator.faults import (
    AccessType,
    InvalidConfig,
    OutcomeKind,
    UnparseableRecord,
)
from pagesim.simulator.replacement import ReplacementPolicy


JOBS_CSV = """jobID,jobSize,arrival,duration
1,1000,0,5

abc,200
2,xyz
3,2048,x,
4,600
1,300
5
6,-5
"""


@pytest.fixture
def jobs_csv(tmp_path):
    path = tmp_path / "jobs.csv"
    path.write_text(JOBS_CSV)
    return path


def write_scenario(tmp_path, data, name="scenario.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


class TestParseJobRow:

    def test_full_row(self) -> None:
        job = parse_job_row(["7", " 1000 ", "3", "9"], 512)
        assert (job.job_id, job.size, job.arrival_time, job.duration) == (7, 1000, 3, 9)
        assert job.page_count == 2

    def test_defaults(self) -> None:
        job = parse_job_row(["7", "1500"], 512)
        assert job.arrival_time == 0
        assert job.duration == 3

    def test_non_positive_duration_uses_default(self) -> None:
        job = parse_job_row(["7", "1500", "0", "0"], 512)
        assert job.duration == 3

    def test_bad_id(self) -> None:
        with pytest.raises(UnparseableRecord) as exc:
            parse_job_row(["x", "100"], 512, line_number=4)
        assert exc.value.line_number == 4
        assert "jobID" in exc.value.reason


class TestImportJobsCsv:

    def test_imports_valid_rows_in_order(self, jobs_csv) -> None:
        result = import_jobs_csv(jobs_csv, 512)
        assert [job.job_id for job in result.jobs] == [1, 3, 4]

    def test_field_defaults(self, jobs_csv) -> None:
        jobs = {job.job_id: job for job in import_jobs_csv(jobs_csv, 512).jobs}
        assert (jobs[1].arrival_time, jobs[1].duration) == (0, 5)
        assert (jobs[3].arrival_time, jobs[3].duration) == (0, 4)
        assert jobs[4].duration == 1
        assert jobs[3].page_count == 4

    def test_skipped_records(self, jobs_csv) -> None:
        skipped = import_jobs_csv(jobs_csv, 512).skipped
        assert [s.line_number for s in skipped] == [4, 5, 8, 9, 10]
        assert all(s.kind is OutcomeKind.UNPARSEABLE_RECORD for s in skipped)
        assert "duplicate" in skipped[2].reason

    def test_without_header(self, tmp_path) -> None:
        path = tmp_path / "plain.csv"
        path.write_text("1,100\n2,200\n")
        assert [job.job_id for job in import_jobs_csv(path, 512).jobs] == [1, 2]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            import_jobs_csv(tmp_path / "nope.csv", 512)

    def test_bad_page_size(self, jobs_csv) -> None:
        with pytest.raises(InvalidConfig):
            import_jobs_csv(jobs_csv, 0)


class TestParseScenario:

    def test_defaults(self, tmp_path) -> None:
        config = parse_scenario(write_scenario(tmp_path, {}))
        assert config.memory.frame_count == 10
        assert config.memory.frame_size == 512
        assert config.replacement_policy == "FIFO"
        assert config.mode == "demand"
        assert config.simulation.max_ticks == 100
        assert config.source_file.endswith("scenario.json")

    def test_normalises_case(self, tmp_path) -> None:
        config = parse_scenario(write_scenario(tmp_path, {
            "replacement_policy": "lru",
            "mode": "EVENTS",
            "accesses": [{"job_id": 1, "address": 5, "access_type": "write", "policy": "fifo"}],
        }))
        assert config.replacement_policy == "LRU"
        assert config.mode == "events"
        assert config.accesses[0].access_type == "WRITE"
        assert config.accesses[0].policy == "FIFO"

    @pytest.mark.parametrize("data", [
        {"memory": {"frame_count": 0}},
        {"memory": {"frame_size": -512}},
        {"replacement_policy": "CLOCK"},
        {"mode": "paged"},
        {"jobs": [{"job_id": 1, "size": -1}]},
        {"accesses": [{"job_id": 1, "address": 0, "access_type": "EXEC"}]},
    ])
    def test_invalid(self, tmp_path, data) -> None:
        with pytest.raises(ValidationError):
            parse_scenario(write_scenario(tmp_path, data))

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            parse_scenario(tmp_path / "missing.json")

    def test_jobs_csv_relative_to_scenario(self, tmp_path, jobs_csv) -> None:
        config = parse_scenario(write_scenario(tmp_path, {"jobs_csv": "jobs.csv"}))
        assert config.jobs_csv_path() == jobs_csv.resolve()


class TestBuildJobs:

    def test_csv_then_inline(self, tmp_path, jobs_csv) -> None:
        config = ScenarioConfig(
            jobs_csv=str(jobs_csv),
            jobs=[
                {"job_id": 9, "size": 100},
                {"job_id": 3, "size": 100},
            ],
        )
        result = build_jobs(config)
        assert [job.job_id for job in result.jobs] == [1, 3, 4, 9]
        assert "duplicate jobID 3" in result.skipped[-1].reason

    def test_inline_only(self) -> None:
        config = ScenarioConfig(
            memory={"frame_count": 4, "frame_size": 256},
            jobs=[{"job_id": 1, "size": 1000, "arrival_time": 2}],
        )
        result = build_jobs(config)
        job = result.jobs[0]
        assert job.page_size == 256
        assert job.page_count == 4
        assert job.arrival_time == 2
        assert job.duration == 2
        assert result.skipped == []

    def test_csv_override(self, tmp_path, jobs_csv) -> None:
        config = ScenarioConfig(jobs_csv="elsewhere.csv")
        assert len(build_jobs(config, jobs_csv).jobs) == 3


class TestBuildRequests:

    def test_converts_enums(self) -> None:
        config = ScenarioConfig(accesses=[
            {"job_id": 1, "address": 10},
            {"job_id": 2, "address": 20, "access_type": "WRITE", "policy": "LRU"},
        ])
        first, second = build_requests(config)
        assert first.access_type is AccessType.READ
        assert first.policy is None
        assert second.access_type is AccessType.WRITE
        assert second.policy is ReplacementPolicy.LRU
