"""
Unit tests for ExpirySweeper

Start/stop lifecycle on a task group and failure isolation of a single pass.
"""

from unittest.mock import AsyncMock

import anyio
import pytest

from src.service.hold.app.dto import ReleaseExpiredHoldsResult
from src.service.hold.driving_adapter.background.expiry_sweeper import ExpirySweeper


@pytest.mark.unit
class TestExpirySweeper:
    @pytest.fixture
    def release_expired_holds(self) -> AsyncMock:
        use_case = AsyncMock()
        use_case.execute.return_value = ReleaseExpiredHoldsResult(scanned=1, released=1)
        return use_case

    @pytest.mark.asyncio
    async def test_runs_immediately_then_every_interval(self, release_expired_holds):
        sweeper = ExpirySweeper(
            release_expired_holds_use_case=release_expired_holds, interval_seconds=0.02
        )

        async with anyio.create_task_group() as tg:
            await sweeper.start(task_group=tg)
            assert sweeper.running
            await anyio.sleep(0.1)
            await sweeper.stop()

        assert not sweeper.running
        assert release_expired_holds.execute.await_count >= 2

    @pytest.mark.asyncio
    async def test_stop_cancels_long_sleep(self, release_expired_holds):
        sweeper = ExpirySweeper(
            release_expired_holds_use_case=release_expired_holds, interval_seconds=3600
        )

        with anyio.fail_after(1.0):
            async with anyio.create_task_group() as tg:
                await sweeper.start(task_group=tg)
                await anyio.sleep(0.01)
                await sweeper.stop()

        release_expired_holds.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_before_start_is_noop(self, release_expired_holds):
        sweeper = ExpirySweeper(release_expired_holds_use_case=release_expired_holds)

        await sweeper.stop()

        assert not sweeper.running

    @pytest.mark.asyncio
    async def test_failed_pass_does_not_kill_the_loop(self, release_expired_holds):
        release_expired_holds.execute.side_effect = [
            ConnectionError('db down'),
            ReleaseExpiredHoldsResult(),
            ReleaseExpiredHoldsResult(),
        ] + [ReleaseExpiredHoldsResult()] * 100
        sweeper = ExpirySweeper(
            release_expired_holds_use_case=release_expired_holds, interval_seconds=0.01
        )

        async with anyio.create_task_group() as tg:
            await sweeper.start(task_group=tg)
            await anyio.sleep(0.1)
            await sweeper.stop()

        assert release_expired_holds.execute.await_count >= 2

    @pytest.mark.asyncio
    async def test_sweep_once_swallows_and_reports_none(self, release_expired_holds):
        release_expired_holds.execute.side_effect = ConnectionError('db down')
        sweeper = ExpirySweeper(release_expired_holds_use_case=release_expired_holds)

        assert await sweeper.sweep_once() is None

    @pytest.mark.asyncio
    async def test_sweep_once_returns_result(self, release_expired_holds):
        sweeper = ExpirySweeper(release_expired_holds_use_case=release_expired_holds)

        result = await sweeper.sweep_once()

        assert result.released == 1
