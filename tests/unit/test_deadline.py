"""Unit tests for deadline budgets, non-cancelling races and background tasks."""

import asyncio

import pytest

from src.utils.deadline import (
    DeadlineBudget,
    pending_background_tasks,
    race_with_deadline,
    spawn_background,
)
from src.utils.errors import DeadlineExceeded, UpstreamTimeout


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestDeadlineBudget:
    """Test budget arithmetic."""

    def test_remaining_counts_down(self):
        clock = FakeClock()
        budget = DeadlineBudget(45, clock=clock)
        clock.now += 15
        assert budget.elapsed() == 15
        assert budget.remaining() == 30
        assert not budget.expired()

    def test_remaining_never_negative(self):
        clock = FakeClock()
        budget = DeadlineBudget(5, clock=clock)
        clock.now += 60
        assert budget.remaining() == 0
        assert budget.expired()

    def test_child_takes_tighter_bound(self):
        """Test a child budget never outlives its parent."""
        clock = FakeClock()
        parent = DeadlineBudget(45, clock=clock)
        clock.now += 10

        assert parent.child(60).total_seconds == 35
        assert parent.child(5).total_seconds == 5
        assert parent.child().total_seconds == 35

    def test_zero_budget_is_expired(self):
        assert DeadlineBudget(0).expired()


class TestRaceWithDeadline:
    """Test the race never cancels the guarded work."""

    @pytest.mark.asyncio
    async def test_returns_result_when_work_finishes_first(self):
        async def work():
            return "done"

        assert await race_with_deadline(work(), 1.0, "fast work") == "done"

    @pytest.mark.asyncio
    async def test_propagates_work_exception(self):
        async def work():
            raise ValueError("bad output")

        with pytest.raises(ValueError):
            await race_with_deadline(work(), 1.0, "failing work")

    @pytest.mark.asyncio
    async def test_timeout_raises_and_work_keeps_running(self):
        finished = asyncio.Event()

        async def slow():
            await asyncio.sleep(0.1)
            finished.set()
            return "late"

        with pytest.raises(DeadlineExceeded) as exc:
            await race_with_deadline(slow(), 0.01, "slow work")

        assert isinstance(exc.value, UpstreamTimeout)
        assert exc.value.operation_name == "slow work"
        assert len(pending_background_tasks()) >= 1

        await asyncio.wait_for(finished.wait(), timeout=1.0)
        assert finished.is_set()

    @pytest.mark.asyncio
    async def test_zero_timeout_raises_immediately(self):
        async def work():
            await asyncio.sleep(0.01)
            return "value"

        with pytest.raises(DeadlineExceeded):
            await race_with_deadline(work(), 0, "no time")
        await asyncio.sleep(0.05)


class TestSpawnBackground:
    """Test detached tasks report their own errors."""

    @pytest.mark.asyncio
    async def test_background_result(self):
        async def save():
            return "recipe_1_abc"

        task = spawn_background(save(), "save recipe")
        assert await task == "recipe_1_abc"
        await asyncio.sleep(0)
        assert task not in pending_background_tasks()

    @pytest.mark.asyncio
    async def test_background_failure_is_logged_not_raised(self):
        async def broken():
            raise RuntimeError("database down")

        task = spawn_background(broken(), "broken save")
        await asyncio.wait({task})
        await asyncio.sleep(0)

        assert task.done()
        assert isinstance(task.exception(), RuntimeError)
        assert task not in pending_background_tasks()
