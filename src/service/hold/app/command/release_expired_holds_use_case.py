"""
Release Expired Holds Use Case - one pass of the expiry sweep

Each expired hold is released on its own through ReleaseHoldUseCase. A failure on
one hold is retried with exponential backoff, then logged and skipped so the rest
of the pass continues.
"""

import time

import anyio
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.hold_metrics import metrics
from src.service.hold.app.clock import Clock, utc_now
from src.service.hold.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.hold.app.dto.release_hold_dto import (
    ReleaseExpiredHoldsResult,
    ReleaseHoldResult,
)
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.enum.hold_status import ReleaseReason


class ReleaseExpiredHoldsUseCase:
    def __init__(
        self,
        *,
        uow_factory: HoldUnitOfWorkFactory,
        release_hold_use_case: ReleaseHoldUseCase,
        batch_size: int = 500,
        max_retries: int = 3,
        retry_base_delay: float = 0.5,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.release_hold_use_case = release_hold_use_case
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    async def execute(self) -> ReleaseExpiredHoldsResult:
        with self.tracer.start_as_current_span('use_case.release_expired_holds') as span:
            started = time.perf_counter()
            now = self.clock()
            result = ReleaseExpiredHoldsResult()
            skipped: set[UUID] = set()

            while True:
                async with self.uow_factory() as uow:
                    expired_ids = await uow.hold_repo.list_expired_active_ids(
                        now=now, limit=self.batch_size + len(skipped)
                    )
                page = [hold_id for hold_id in expired_ids if hold_id not in skipped]
                if not page:
                    break

                for hold_id in page[: self.batch_size]:
                    result.scanned += 1
                    try:
                        release_result = await self._release_with_retry(hold_id=hold_id)
                    except Exception as e:
                        result.failed += 1
                        skipped.add(hold_id)
                        Logger.base.error(
                            f'❌ [SWEEP] Giving up on hold {hold_id} after '
                            f'{self.max_retries} retries: {type(e).__name__}: {e}'
                        )
                        continue

                    if release_result.success:
                        result.released += 1
                    else:
                        result.already_terminal += 1
                        skipped.add(hold_id)

                if len(page) < self.batch_size:
                    break

            span.set_attribute('sweep.scanned', result.scanned)
            span.set_attribute('sweep.released', result.released)
            span.set_attribute('sweep.failed', result.failed)
            metrics.record_sweep(
                released=result.released,
                failed=result.failed,
                duration=time.perf_counter() - started,
            )

            if result.released or result.failed:
                Logger.base.info(
                    f'🧹 [SWEEP] Released {result.released} expired holds '
                    f'(scanned={result.scanned}, already_terminal={result.already_terminal}, '
                    f'failed={result.failed})'
                )
            return result

    async def _release_with_retry(self, *, hold_id: UUID) -> ReleaseHoldResult:
        attempt = 0
        while True:
            try:
                return await self.release_hold_use_case.execute(
                    hold_id=hold_id, reason=ReleaseReason.EXPIRED
                )
            except Exception as e:
                if attempt >= self.max_retries:
                    raise
                delay = self.retry_base_delay * (2**attempt)
                attempt += 1
                Logger.base.warning(
                    f'🔄 [SWEEP] Release of hold {hold_id} failed ({type(e).__name__}: {e}), '
                    f'retry {attempt}/{self.max_retries} in {delay}s'
                )
                await anyio.sleep(delay)
