"""Partner Policy Cache - TTL cache in front of the admin store"""

import time
from typing import Dict, TypedDict

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_partner_policy_provider import IPartnerPolicyProvider
from src.service.hold.domain.value_object.partner_policy import PartnerPolicy


class CacheEntry(TypedDict):
    policy: PartnerPolicy
    timestamp: float


class CachedPartnerPolicyProvider(IPartnerPolicyProvider):
    """
    Caches policies per partner for ttl_seconds.

    Staleness bound: an admin change made on another instance is picked up within
    ttl_seconds. invalidate() drops entries immediately on this instance.
    """

    def __init__(self, *, inner: IPartnerPolicyProvider, ttl_seconds: float = 30.0) -> None:
        self.inner = inner
        self.tracer = trace.get_tracer(__name__)
        self._cache: Dict[str, CacheEntry] = {}
        self._ttl_seconds = ttl_seconds

    def _is_expired(self, *, entry: CacheEntry) -> bool:
        return time.monotonic() - entry['timestamp'] > self._ttl_seconds

    async def get_policy(self, *, partner_id: str) -> PartnerPolicy:
        with self.tracer.start_as_current_span('policy.cache.get_policy') as span:
            entry = self._cache.get(partner_id)
            if entry and not self._is_expired(entry=entry):
                span.set_attribute('cache_hit', True)
                return entry['policy']

            span.set_attribute('cache_hit', False)
            policy = await self.inner.get_policy(partner_id=partner_id)
            self._cache[partner_id] = {'policy': policy, 'timestamp': time.monotonic()}
            return policy

    def invalidate(self, *, partner_id: str | None = None) -> None:
        if partner_id is None:
            self._cache.clear()
        else:
            self._cache.pop(partner_id, None)
        self.inner.invalidate(partner_id=partner_id)
        Logger.base.debug(f'🧽 [POLICY] Cache invalidated for {partner_id or "all partners"}')
