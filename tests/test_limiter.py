"""Tests for the FIFO concurrency limiter."""

import asyncio

import pytest

from orchestrator import ConcurrencyLimiter


class TestConcurrencyLimiter:

    def test_never_exceeds_bound(self):
        limiter = ConcurrencyLimiter(max_concurrency=3)
        running = 0
        observed = []

        async def work(i):
            nonlocal running
            running += 1
            observed.append(running)
            await asyncio.sleep(0.01)
            running -= 1
            return i

        async def main():
            return await asyncio.gather(*(limiter.schedule(work, i) for i in range(10)))

        results = asyncio.run(main())
        assert results == list(range(10))
        assert max(observed) == 3
        assert limiter.peak == 3
        assert limiter.active == 0
        assert limiter.pending == 0

    def test_starts_in_submission_order(self):
        limiter = ConcurrencyLimiter(max_concurrency=2)
        started = []

        async def work(i):
            started.append(i)
            # Later submissions finish first; the start order must not follow them
            await asyncio.sleep(0.001 * (10 - i))

        async def main():
            await asyncio.gather(*(limiter.schedule(work, i) for i in range(8)))

        asyncio.run(main())
        assert started == list(range(8))

    def test_failure_releases_slot(self):
        limiter = ConcurrencyLimiter(max_concurrency=1)

        async def boom():
            raise RuntimeError("model down")

        async def ok():
            return "fine"

        async def main():
            return await asyncio.gather(limiter.schedule(boom), limiter.schedule(ok), return_exceptions=True)

        first, second = asyncio.run(main())
        assert isinstance(first, RuntimeError)
        assert second == "fine"
        assert limiter.active == 0

    def test_cancelled_waiter_gives_up_its_place(self):
        limiter = ConcurrencyLimiter(max_concurrency=1)
        release = None

        async def hold():
            await release.wait()
            return "held"

        async def quick():
            return "quick"

        async def main():
            nonlocal release
            release = asyncio.Event()
            holder = asyncio.ensure_future(limiter.schedule(hold))
            await asyncio.sleep(0)
            waiter = asyncio.ensure_future(limiter.schedule(quick))
            await asyncio.sleep(0)
            assert limiter.pending == 1
            waiter.cancel()
            await asyncio.sleep(0)
            assert limiter.pending == 0
            release.set()
            held = await holder
            after = await limiter.schedule(quick)
            return held, after, waiter.cancelled()

        held, after, cancelled = asyncio.run(main())
        assert (held, after, cancelled) == ("held", "quick", True)
        assert limiter.active == 0

    def test_kwargs_forwarded(self):
        limiter = ConcurrencyLimiter()

        async def join(a, b=""):
            return a + b

        assert asyncio.run(limiter.schedule(join, "x", b="y")) == "xy"

    @pytest.mark.parametrize("bad", [0, -1])
    def test_bound_must_be_positive(self, bad):
        with pytest.raises(ValueError):
            ConcurrencyLimiter(max_concurrency=bad)
