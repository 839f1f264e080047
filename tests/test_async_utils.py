"""
Bounded concurrency helper
"""

import asyncio

import pytest

from slugpush.utils.async_utils import run_async, run_bounded


class TestRunBounded:
    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        async def slow_square(n):
            await asyncio.sleep(0.01 * (5 - n))
            return n * n

        assert await run_bounded(range(5), slow_square, max_workers=5) == [0, 1, 4, 9, 16]

    @pytest.mark.asyncio
    async def test_respects_worker_limit(self):
        in_flight = 0
        peak = 0

        async def track(n):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return n

        await run_bounded(range(10), track, max_workers=3)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_nothing_starts_after_a_failure(self):
        started = []

        async def process(n):
            started.append(n)
            if n == 1:
                raise ValueError("boom")
            return n

        with pytest.raises(ValueError):
            await run_bounded(range(6), process, max_workers=1)

        assert started == [0, 1]

    @pytest.mark.asyncio
    async def test_empty_input(self):
        async def process(n):
            return n

        assert await run_bounded([], process) == []


def test_run_async_outside_a_loop():
    async def answer():
        return 42

    assert run_async(answer()) == 42
