"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.service.hold.driven_adapter.event.in_memory_hold_event_broadcaster import (
    InMemoryHoldEventBroadcasterImpl,
)
from src.service.hold.driven_adapter.policy.cached_partner_policy_provider import (
    CachedPartnerPolicyProvider,
)
from src.service.hold.driven_adapter.policy.partner_policy_provider_impl import (
    PartnerPolicyProviderImpl,
)
from src.service.hold.driven_adapter.repo.hold_unit_of_work_impl import SqlAlchemyHoldUnitOfWork
from src.service.hold.driven_adapter.state.in_memory_hold_store import InMemoryHoldStore
from src.service.hold.driven_adapter.state.in_memory_hold_unit_of_work import (
    InMemoryHoldUnitOfWork,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Process-local store for HOLD_STORE_BACKEND=memory
    in_memory_hold_store = providers.Singleton(InMemoryHoldStore)

    # Unit of work: a new instance per atomic section.
    # Inject `Container.hold_unit_of_work.provider` to get the factory itself.
    hold_unit_of_work = providers.Selector(
        config_service.provided.HOLD_STORE_BACKEND,
        postgres=providers.Factory(
            SqlAlchemyHoldUnitOfWork, session_factory=database.provided.session
        ),
        memory=providers.Factory(InMemoryHoldUnitOfWork, store=in_memory_hold_store),
    )

    # Partner policy: admin store behind a TTL cache
    partner_policy_provider = providers.Singleton(
        CachedPartnerPolicyProvider,
        inner=providers.Singleton(
            PartnerPolicyProviderImpl,
            uow_factory=hold_unit_of_work.provider,
            default_quota_percentage=config_service.provided.DEFAULT_HOLD_QUOTA_PERCENTAGE,
            default_expiry_minutes=config_service.provided.DEFAULT_HOLD_EXPIRY_MINUTES,
        ),
        ttl_seconds=config_service.provided.PARTNER_POLICY_CACHE_TTL_SECONDS,
    )

    # Hold lifecycle events (SSE fan-out)
    hold_event_publisher = providers.Singleton(InMemoryHoldEventBroadcasterImpl)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
