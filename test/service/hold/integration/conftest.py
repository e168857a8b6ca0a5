"""
PostgreSQL fixtures

Overrides `uow_factory` so the shared use-case fixtures run on SqlAlchemyHoldUnitOfWork.
Tables are recreated per test; the whole module is skipped when the database
is unreachable.
"""

from collections.abc import AsyncGenerator
from functools import partial

import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.platform.database.orm_db_setting import AsyncEngineManager, Base, Database
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.driven_adapter.repo.hold_unit_of_work_impl import SqlAlchemyHoldUnitOfWork
import src.service.hold.driven_adapter.model  # noqa: F401


@pytest.fixture
async def engine_manager() -> AsyncGenerator[AsyncEngineManager, None]:
    manager = AsyncEngineManager()
    try:
        async with manager.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await manager.dispose()
        pytest.skip(f'PostgreSQL unavailable: {e}')

    yield manager
    await manager.dispose()


@pytest.fixture
def uow_factory(engine_manager: AsyncEngineManager) -> HoldUnitOfWorkFactory:
    database = Database(engine_manager=engine_manager)
    return partial(SqlAlchemyHoldUnitOfWork, session_factory=database.session)
