from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.app.interface.i_partner_policy_provider import IPartnerPolicyProvider
from src.service.hold.domain.entity.partner_entity import Partner
from src.service.hold.domain.value_object.partner_policy import PartnerPolicy


class PartnerPolicyProviderImpl(IPartnerPolicyProvider):
    """
    Reads partner overrides from the admin store on every call.

    A partner without a stored row gets the service defaults with holds enabled.
    """

    def __init__(
        self,
        *,
        uow_factory: HoldUnitOfWorkFactory,
        default_quota_percentage: float = settings.DEFAULT_HOLD_QUOTA_PERCENTAGE,
        default_expiry_minutes: int = settings.DEFAULT_HOLD_EXPIRY_MINUTES,
    ) -> None:
        self.uow_factory = uow_factory
        self.default_quota_percentage = default_quota_percentage
        self.default_expiry_minutes = default_expiry_minutes

    @Logger.io
    async def get_policy(self, *, partner_id: str) -> PartnerPolicy:
        async with self.uow_factory() as uow:
            partner = await uow.partner_repo.get(partner_id=partner_id)

        return (partner or Partner(id=partner_id)).to_policy(
            default_quota_percentage=self.default_quota_percentage,
            default_expiry_minutes=self.default_expiry_minutes,
        )

    def invalidate(self, *, partner_id: str | None = None) -> None:
        pass  # nothing cached
