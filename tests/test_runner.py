"""Tests for ScenarioRunner in each run mode."""

import pytest

from conftest import FRAME_SIZE
from pagesim.models.job import Job
from pagesim.simulator.faults import AccessType, OutcomeKind
from pagesim.simulator.memory import MemorySystem
from pagesim.simulator.replacement import ReplacementPolicy
from pagesim.simulator.runner import AccessRequest, ScenarioRunner


def runner_for(mode, frame_count=10, jobs=(), **kwargs):
    memory = MemorySystem(frame_count=frame_count, frame_size=FRAME_SIZE, seed=11)
    runner = ScenarioRunner(memory, mode=mode, **kwargs)
    runner.register_jobs([Job.create(j, size, FRAME_SIZE, **extra) for j, size, extra in jobs])
    return runner


def page_requests(job_id, pages):
    return [AccessRequest(job_id, page * FRAME_SIZE) for page in pages]


class TestStaticMode:

    def test_allocates_then_resolves(self) -> None:
        runner = runner_for("static", jobs=[(1, 1000, {}), (2, 5000, {})])

        result = runner.run([AccessRequest(1, 700), AccessRequest(2, 0)])

        assert [(a.job_id, a.success) for a in result.allocations] == [(1, True), (2, False)]
        assert len(result.allocations[0].frames) == 2
        assert result.accesses[0].success
        assert result.accesses[0].resolution.access is None
        assert result.accesses[1].outcome.kind is OutcomeKind.PAGE_NOT_LOADED
        assert [o.kind for o in result.outcomes] == [
            OutcomeKind.INSUFFICIENT_MEMORY,
            OutcomeKind.PAGE_NOT_LOADED,
        ]
        assert result.clock == 0
        assert result.total_faults == 0

    def test_usage_snapshot(self) -> None:
        result = runner_for("static", jobs=[(1, 1000, {})]).run()
        assert result.usage.used_frames == 2
        assert sum(not f.free for f in result.frames) == 2
        assert [p.resident for p in result.pages] == [True, True]


class TestDemandMode:

    def test_fifo_reference_string(self) -> None:
        runner = runner_for("demand", frame_count=3, jobs=[(1, 5 * FRAME_SIZE, {})])

        result = runner.run(page_requests(1, [1, 2, 3, 4, 1]))

        assert result.total_faults == 5
        assert result.jobs[0].loaded_page_count == 3
        assert all(a.resolution.faulted for a in result.accesses)
        assert result.clock == 5

    def test_policy_switch_per_request(self) -> None:
        runner = runner_for("demand", frame_count=2, jobs=[(1, 3 * FRAME_SIZE, {})])
        requests = page_requests(1, [0, 1, 0])
        requests.append(AccessRequest(1, 2 * FRAME_SIZE, policy=ReplacementPolicy.LRU))

        result = runner.run(requests)

        last = result.accesses[-1]
        assert last.policy is ReplacementPolicy.LRU
        assert last.resolution.access.evicted_page_number == 1
        assert result.policy is ReplacementPolicy.LRU

    def test_errors_do_not_stop_the_run(self) -> None:
        runner = runner_for("demand", jobs=[(1, 1000, {})])

        result = runner.run([
            AccessRequest(1, 5000),
            AccessRequest(9, 0),
            AccessRequest(1, 10, AccessType.WRITE),
        ])

        assert [a.success for a in result.accesses] == [False, False, True]
        assert result.accesses[0].outcome.kind is OutcomeKind.OUT_OF_BOUNDS
        assert result.accesses[1].outcome.kind is OutcomeKind.UNKNOWN_JOB
        assert result.pages[0].modified is True


class TestEventsMode:

    def test_simulation_then_static_resolution(self) -> None:
        runner = runner_for(
            "events",
            frame_count=2,
            jobs=[(1, 1000, {"duration": 2}), (2, 1000, {"duration": 1})],
        )

        result = runner.run([AccessRequest(2, 0)])

        assert result.simulation.completed == [1, 2]
        assert result.accesses[0].outcome.kind is OutcomeKind.PAGE_NOT_LOADED
        assert result.usage.used_frames == 0

    def test_max_ticks_passed_through(self) -> None:
        runner = runner_for("events", frame_count=1, jobs=[(1, 5000, {})], max_ticks=3)
        result = runner.run()
        assert result.simulation.timed_out
        assert result.simulation.final_time == 4


class TestRunner:

    def test_rejects_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            ScenarioRunner(MemorySystem(frame_count=1, frame_size=1), mode="swap")

    def test_duplicate_registration_reported(self) -> None:
        memory = MemorySystem(frame_count=2, frame_size=FRAME_SIZE)
        runner = ScenarioRunner(memory)
        added = runner.register_jobs([
            Job.create(1, 100, FRAME_SIZE),
            Job.create(1, 200, FRAME_SIZE),
        ])
        assert added == 1
        assert runner.outcomes[0].kind is OutcomeKind.DUPLICATE_JOB

    def test_to_dict(self) -> None:
        result = runner_for("demand", jobs=[(1, 1000, {})]).run([AccessRequest(1, 700)])
        data = result.to_dict()
        assert data["mode"] == "demand"
        assert data["policy"] == "FIFO"
        assert data["total_faults"] == 1
        assert data["simulation"] is None
        assert data["job_table"][0]["fault_count"] == 1
        assert len(data["page_map_table"]) == 2
        assert len(data["memory_map_table"]) == 10
        assert data["accesses"][0]["resolution"]["physical_address"] == 188
