"""Tests for redraw coalescing, lifetime scopes and the background refresher."""

import asyncio
import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from fakes import wait_until  # noqa: E402

from commander.errors import TransportError  # noqa: E402
from commander.refresher import BackgroundRefresher  # noqa: E402
from commander.render import RenderCoordinator  # noqa: E402
from commander.scope import LifetimeScope  # noqa: E402


class TestRenderCoordinator:
    """Tests for the single-slot render signal."""

    def test_requests_coalesce_into_one_pending_redraw(self) -> None:
        coordinator = RenderCoordinator()

        for _ in range(10):
            coordinator.request_render()

        assert coordinator.pending
        assert coordinator.consume() is True
        assert coordinator.consume() is False
        assert not coordinator.pending

    def test_wait_returns_when_pending_without_clearing(self) -> None:
        async def scenario() -> bool:
            coordinator = RenderCoordinator()
            waiter = asyncio.ensure_future(coordinator.wait())
            await asyncio.sleep(0)
            assert not waiter.done()

            coordinator.request_render()
            await asyncio.wait_for(waiter, timeout=1)
            return coordinator.pending

        assert asyncio.run(scenario()) is True

    def test_request_from_worker_thread_wakes_waiter(self) -> None:
        async def scenario() -> None:
            coordinator = RenderCoordinator()
            waiter = asyncio.ensure_future(coordinator.wait())
            await asyncio.sleep(0)

            thread = threading.Thread(target=coordinator.request_render)
            thread.start()
            thread.join()

            await asyncio.wait_for(waiter, timeout=1)

        asyncio.run(scenario())


class TestLifetimeScope:
    """Tests for LifetimeScope cancellation."""

    def test_cancel_is_idempotent_and_stops_tasks(self) -> None:
        async def scenario() -> None:
            scope = LifetimeScope("test")
            task = scope.spawn(asyncio.sleep(60))

            scope.cancel()
            scope.cancel()
            await scope.aclose()

            assert scope.cancelled
            assert task.cancelled()
            assert scope.active_tasks == 0

        asyncio.run(scenario())

    def test_spawn_after_cancel_raises(self) -> None:
        async def scenario() -> None:
            scope = LifetimeScope("test")
            scope.cancel()
            with pytest.raises(RuntimeError):
                scope.spawn(asyncio.sleep(0))

        asyncio.run(scenario())

    def test_aclose_does_not_deadlock_on_blocking_call_in_flight(self) -> None:
        release = threading.Event()

        async def blocking() -> None:
            await asyncio.to_thread(release.wait, 5)

        async def scenario() -> None:
            scope = LifetimeScope("test")
            scope.spawn(blocking())
            await asyncio.sleep(0.01)
            await asyncio.wait_for(scope.aclose(), timeout=1)
            release.set()

        try:
            asyncio.run(scenario())
        finally:
            release.set()


class TestBackgroundRefresher:
    """Tests for BackgroundRefresher scheduling and failure policy."""

    def test_ticks_until_scope_cancelled(self) -> None:
        calls = []

        async def tick() -> None:
            calls.append(1)

        async def scenario() -> None:
            scope = LifetimeScope("test")
            refresher = BackgroundRefresher(scope, 0.01, tick)
            refresher.start()
            await wait_until(lambda: len(calls) >= 3)

            await scope.aclose()
            stopped_at = len(calls)
            await asyncio.sleep(0.1)

            assert len(calls) == stopped_at
            assert not refresher.running

        asyncio.run(scenario())

    def test_transport_error_is_reported_and_next_tick_retries(self) -> None:
        outcomes = iter([TransportError("down"), None, None])
        errors = []
        successes = []

        async def tick() -> None:
            outcome = next(outcomes, None)
            if outcome is not None:
                raise outcome
            successes.append(1)

        async def scenario() -> None:
            scope = LifetimeScope("test")
            BackgroundRefresher(scope, 0.01, tick, on_error=errors.append).start()
            await wait_until(lambda: len(successes) >= 2)
            await scope.aclose()

        asyncio.run(scenario())
        assert len(errors) == 1
        assert str(errors[0]) == "down"

    def test_trigger_runs_one_tick_immediately(self) -> None:
        calls = []

        async def tick() -> None:
            calls.append(1)

        async def scenario() -> None:
            scope = LifetimeScope("test")
            refresher = BackgroundRefresher(scope, 60, tick)
            refresher.start()
            refresher.trigger()
            await wait_until(lambda: len(calls) == 1)
            await scope.aclose()

        asyncio.run(scenario())

    def test_start_twice_raises(self) -> None:
        async def tick() -> None:
            pass

        async def scenario() -> None:
            scope = LifetimeScope("test")
            refresher = BackgroundRefresher(scope, 60, tick)
            refresher.start()
            with pytest.raises(RuntimeError):
                refresher.start()
            await scope.aclose()

        asyncio.run(scenario())

    def test_ticks_never_overlap_and_triggers_collapse(self) -> None:
        running = []
        overlap = []
        calls = []

        async def scenario() -> None:
            release = asyncio.Event()

            async def tick() -> None:
                if running:
                    overlap.append(1)
                running.append(1)
                calls.append(1)
                try:
                    if len(calls) == 1:
                        await release.wait()
                finally:
                    running.pop()

            scope = LifetimeScope("test")
            refresher = BackgroundRefresher(scope, 60, tick)
            refresher.start()
            refresher.trigger()
            await wait_until(lambda: len(calls) == 1)

            for _ in range(5):
                refresher.trigger()
            await asyncio.sleep(0.05)
            assert len(calls) == 1

            release.set()
            await wait_until(lambda: len(calls) == 2)
            await asyncio.sleep(0.05)
            await scope.aclose()

        asyncio.run(scenario())
        assert len(calls) == 2
        assert overlap == []
