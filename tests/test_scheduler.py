"""Tests for the event-driven arrival/completion scheduler."""

from conftest import FRAME_SIZE, register
from pagesim.simulator.memory import MemorySystem
from pagesim.simulator.scheduler import (
    Event,
    EventKind,
    EventScheduler,
    run_event_simulation,
)


def one_frame() -> MemorySystem:
    return MemorySystem(frame_count=1, frame_size=FRAME_SIZE, seed=3)


def actions(result):
    return [(e.time, e.action, e.job_id) for e in result.timeline]


class TestEventOrdering:

    def test_time_then_kind_then_sequence(self) -> None:
        """Arrivals sort before completions at the same time."""
        events = sorted([
            Event(1, EventKind.COMPLETION, 1, job_id=9),
            Event(1, EventKind.ARRIVAL, 3, job_id=8),
            Event(0, EventKind.COMPLETION, 4, job_id=7),
            Event(1, EventKind.ARRIVAL, 2, job_id=6),
        ])
        assert [e.job_id for e in events] == [7, 6, 8, 9]

    def test_job_id_not_compared(self) -> None:
        assert Event(0, EventKind.ARRIVAL, 1, job_id=1) == Event(0, EventKind.ARRIVAL, 1, job_id=2)


class TestScheduler:

    def test_waiting_job_allocated_on_completion(self) -> None:
        """A job that does not fit waits until a completion frees frames."""
        memory = one_frame()
        register(memory, 1, 500, arrival_time=0, duration=5)
        job2 = register(memory, 2, 500, arrival_time=0, duration=3)

        result = run_event_simulation(memory, max_ticks=100)

        assert actions(result) == [
            (0, "ARRIVAL", 1),
            (0, "ALLOCATED", 1),
            (0, "ARRIVAL", 2),
            (0, "WAITING", 2),
            (5, "COMPLETE", 1),
            (5, "ALLOCATED_FROM_QUEUE", 2),
            (8, "COMPLETE", 2),
        ]
        assert job2.start_time == 5
        assert result.completed == [1, 2]
        assert result.waiting == []
        assert result.timed_out is False
        assert result.final_time == 9

    def test_frames_released_at_end(self) -> None:
        memory = one_frame()
        register(memory, 1, 500, duration=2)
        run_event_simulation(memory)
        assert memory.free_frame_count() == 1
        assert memory.jobs[1].loaded_pages == set()

    def test_arrival_before_completion_at_same_tick(self) -> None:
        """At t=2 the arrival is processed before the completion."""
        memory = one_frame()
        register(memory, 1, 500, arrival_time=0, duration=2)
        job2 = register(memory, 2, 500, arrival_time=2)

        result = run_event_simulation(memory)

        assert [a for a in actions(result) if a[0] == 2] == [
            (2, "ARRIVAL", 2),
            (2, "WAITING", 2),
            (2, "COMPLETE", 1),
            (2, "ALLOCATED_FROM_QUEUE", 2),
        ]
        assert job2.start_time == 2
        assert result.completed == [1, 2]

    def test_waiting_queue_is_fifo(self) -> None:
        """Waiting jobs are retried in arrival order, the rest requeued."""
        memory = MemorySystem(frame_count=2, frame_size=FRAME_SIZE, seed=3)
        register(memory, 1, 2 * FRAME_SIZE, duration=3)
        register(memory, 2, 2 * FRAME_SIZE, duration=1)
        register(memory, 3, FRAME_SIZE, duration=1)

        result = run_event_simulation(memory)

        assert (3, "ALLOCATED_FROM_QUEUE", 2) in actions(result)
        assert (4, "ALLOCATED_FROM_QUEUE", 3) in actions(result)
        assert result.completed == [1, 2, 3]

    def test_late_arrival(self) -> None:
        """Nothing happens before a job's arrival time."""
        memory = one_frame()
        job = register(memory, 1, 100, arrival_time=4, duration=1)

        result = run_event_simulation(memory)

        assert actions(result)[0] == (4, "ARRIVAL", 1)
        assert job.start_time == 4
        assert result.final_time == 6

    def test_zero_size_job_completes(self) -> None:
        memory = one_frame()
        register(memory, 1, 0, duration=1)
        result = run_event_simulation(memory)
        assert result.completed == [1]

    def test_never_fits_times_out(self) -> None:
        """A job larger than memory keeps the loop alive until max_ticks."""
        memory = one_frame()
        register(memory, 7, 2 * FRAME_SIZE)

        result = run_event_simulation(memory, max_ticks=10)

        assert result.timed_out is True
        assert result.waiting == [7]
        assert result.final_time == 11
        assert len(result.ticks) == 11
        assert result.completed == []

    def test_tick_records_usage(self) -> None:
        memory = MemorySystem(frame_count=4, frame_size=FRAME_SIZE, seed=3)
        register(memory, 1, 3 * FRAME_SIZE, duration=2)

        result = EventScheduler(memory).run()

        assert [(t.time, t.used_frames) for t in result.ticks] == [
            (0, 3), (1, 3), (2, 0)
        ]
        assert all(t.total_frames == 4 for t in result.ticks)

    def test_no_jobs(self) -> None:
        result = run_event_simulation(one_frame())
        assert result.timeline == []
        assert result.final_time == 0

    def test_memory_delegates(self) -> None:
        memory = one_frame()
        register(memory, 1, 500, duration=1)
        result = memory.run_event_simulation(max_ticks=5)
        assert result.completed == [1]

    def test_to_dict(self) -> None:
        memory = one_frame()
        register(memory, 1, 500, duration=1)
        data = run_event_simulation(memory).to_dict()
        assert data["completed"] == [1]
        assert data["timeline"][0]["action"] == "ARRIVAL"
