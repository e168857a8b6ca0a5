"""
Expiry Sweeper - recurring release of expired holds

Owned by the application lifespan: start() schedules the loop on the app task group,
stop() cancels it. A failed pass is logged and the loop carries on at the next tick.
"""

import anyio
from anyio.abc import TaskGroup, TaskStatus

from src.platform.logging.loguru_io import Logger
from src.service.hold.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)
from src.service.hold.app.dto.release_hold_dto import ReleaseExpiredHoldsResult


class ExpirySweeper:
    def __init__(
        self,
        *,
        release_expired_holds_use_case: ReleaseExpiredHoldsUseCase,
        interval_seconds: float = 300.0,
    ) -> None:
        self.release_expired_holds_use_case = release_expired_holds_use_case
        self.interval_seconds = interval_seconds
        self._cancel_scope: anyio.CancelScope | None = None
        self._stopped: anyio.Event | None = None

    @property
    def running(self) -> bool:
        return self._cancel_scope is not None and not self._cancel_scope.cancel_called

    async def start(self, *, task_group: TaskGroup) -> None:
        """Start the sweep loop on the given task group"""
        if self.running:
            return
        self._stopped = anyio.Event()
        await task_group.start(self._sweep_loop)  # pyrefly: ignore[bad-argument-type]
        Logger.base.info(f'🧹 [SWEEP] Expiry sweeper started (every {self.interval_seconds}s)')

    async def stop(self) -> None:
        if self._cancel_scope is None:
            return
        self._cancel_scope.cancel()
        if self._stopped is not None:
            await self._stopped.wait()
        Logger.base.info('🛑 [SWEEP] Expiry sweeper stopped')

    async def sweep_once(self) -> ReleaseExpiredHoldsResult | None:
        try:
            return await self.release_expired_holds_use_case.execute()
        except Exception as e:
            # Store unreachable for the whole pass, try again next tick
            Logger.base.error(f'❌ [SWEEP] Sweep pass failed: {type(e).__name__}: {e}')
            return None

    async def _sweep_loop(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        with anyio.CancelScope() as scope:
            self._cancel_scope = scope
            task_status.started()
            try:
                while True:
                    await self.sweep_once()
                    await anyio.sleep(self.interval_seconds)
            finally:
                self._cancel_scope = None
                if self._stopped is not None:
                    self._stopped.set()
