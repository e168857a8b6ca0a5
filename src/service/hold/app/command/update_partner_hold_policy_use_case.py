from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.dto.inventory_dto import UpdatePartnerHoldPolicyRequest
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.app.interface.i_partner_policy_provider import IPartnerPolicyProvider
from src.service.hold.domain.entity.partner_entity import Partner


class UpdatePartnerHoldPolicyUseCase:
    """
    Admin update of a partner's hold settings.

    Unknown partners are created with the given overrides. The cached policy is
    invalidated after commit so this instance sees the change immediately; other
    instances see it within PARTNER_POLICY_CACHE_TTL_SECONDS.
    """

    def __init__(
        self,
        *,
        uow_factory: HoldUnitOfWorkFactory,
        policy_provider: IPartnerPolicyProvider,
        min_hold_expiry_minutes: int = settings.MIN_HOLD_EXPIRY_MINUTES,
    ) -> None:
        self.uow_factory = uow_factory
        self.policy_provider = policy_provider
        self.min_hold_expiry_minutes = min_hold_expiry_minutes

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: HoldUnitOfWorkFactory = Depends(Provide[Container.hold_unit_of_work.provider]),
        policy_provider: IPartnerPolicyProvider = Depends(
            Provide[Container.partner_policy_provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, policy_provider=policy_provider)

    def _validate(self, request: UpdatePartnerHoldPolicyRequest) -> None:
        if request.quota_percentage is not None and not 0 <= request.quota_percentage <= 100:
            raise DomainError('Hold quota percentage must be between 0 and 100')
        if (
            request.hold_expiry_minutes is not None
            and request.hold_expiry_minutes < self.min_hold_expiry_minutes
        ):
            raise DomainError(
                f'Hold expiry must be at least {self.min_hold_expiry_minutes} minutes'
            )

    @Logger.io
    async def execute(self, request: UpdatePartnerHoldPolicyRequest) -> Partner:
        self._validate(request)

        async with self.uow_factory() as uow:
            partner = await uow.partner_repo.get(partner_id=request.partner_id) or Partner(
                id=request.partner_id
            )
            updated = partner.update_hold_settings(
                hold_enabled=request.hold_enabled,
                hold_quota_percentage=request.quota_percentage,
                hold_expiry_minutes=request.hold_expiry_minutes,
            )
            await uow.partner_repo.save(partner=updated)
            await uow.commit()

        self.policy_provider.invalidate(partner_id=request.partner_id)
        Logger.base.info(
            f'🛠️ [POLICY] Partner {request.partner_id} hold settings updated: '
            f'enabled={updated.hold_enabled}, pct={updated.hold_quota_percentage}, '
            f'expiry_min={updated.hold_expiry_minutes}'
        )
        return updated
