"""
Production FastAPI Application

Hold quota API plus the background expiry sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.hold.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)
from src.service.hold.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.hold.driving_adapter.background.expiry_sweeper import ExpirySweeper


def build_expiry_sweeper() -> ExpirySweeper:
    uow_factory = container.hold_unit_of_work.provider
    release_expired_holds = ReleaseExpiredHoldsUseCase(
        uow_factory=uow_factory,
        release_hold_use_case=ReleaseHoldUseCase(
            uow_factory=uow_factory, event_publisher=container.hold_event_publisher()
        ),
        batch_size=settings.HOLD_SWEEP_BATCH_SIZE,
        max_retries=settings.HOLD_SWEEP_MAX_RETRIES,
        retry_base_delay=settings.HOLD_SWEEP_RETRY_BASE_DELAY_SECONDS,
    )
    return ExpirySweeper(
        release_expired_holds_use_case=release_expired_holds,
        interval_seconds=settings.HOLD_SWEEP_INTERVAL_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Hold Service] Starting up...')

    tracing = TracingConfig(service_name='hold-quota-service')
    tracing.setup()
    Logger.base.info('📊 [Hold Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Hold Service] Dependency injection wired')

    if settings.HOLD_STORE_BACKEND == 'postgres':
        await create_db_and_tables()
        tracing.instrument_sqlalchemy(engine=get_engine())
        Logger.base.info('🗄️  [Hold Service] Database tables ensured + engine instrumented')
    else:
        Logger.base.warning('⚠️ [Hold Service] In-memory hold store, state is lost on restart')

    async with anyio.create_task_group() as tg:
        sweeper: ExpirySweeper | None = None
        if settings.ENABLE_HOLD_SWEEPER:
            sweeper = build_expiry_sweeper()
            await sweeper.start(task_group=tg)

        Logger.base.info('✅ [Hold Service] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Hold Service] Shutting down...')
        if sweeper is not None:
            await sweeper.stop()
        tg.cancel_scope.cancel()

    if settings.HOLD_STORE_BACKEND == 'postgres':
        await dispose_engine()
        Logger.base.info('🗄️  [Hold Service] Database engine disposed')

    tracing.shutdown()
    Logger.base.info('📊 [Hold Service] Tracing shutdown complete')

    container.unwire()

    Logger.base.info('👋 [Hold Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
