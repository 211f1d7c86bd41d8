"""
barberbook/features/entitlements/service.py

Entitlement resolver.

Answers capability and quota questions for a tier against an immutable
limits table. Holds no account state: callers pass tier and usage counts
on every query.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union
import logging

from barberbook.core.errors import ConfigError
from barberbook.core.logging import bind_account_id, log_event
from barberbook.features.plans.service import (
    DEFAULT_PLAN_CATALOG,
    LimitsTable,
    default_limits_table,
    get_plan_info,
    validate_limits_table,
)
from barberbook.models.account import AccountSnapshot
from barberbook.models.limits import Limits, is_unbounded
from barberbook.models.plan import PlanInfo
from barberbook.models.tier import Capability, Tier


logger = logging.getLogger("barberbook")

TierLike = Union[Tier, str]
CapabilityLike = Union[Capability, str]

# Share of a quota at which usage is reported as approaching the limit
APPROACHING_LIMIT_RATIO = 0.8

_QUOTA_FIELD_FOR = {
    Capability.MORE_SERVICES: "max_services",
    Capability.MORE_PHOTOS: "max_photos",
}


class UsageStatus(str, Enum):
    OK = "ok"
    APPROACHING_LIMIT = "approaching_limit"
    AT_LIMIT = "at_limit"


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    remaining: int
    limit: int
    current_usage: int
    unbounded: bool = False

    @property
    def status(self) -> UsageStatus:
        if self.current_usage >= self.limit:
            return UsageStatus.AT_LIMIT
        if self.current_usage >= self.limit * APPROACHING_LIMIT_RATIO:
            return UsageStatus.APPROACHING_LIMIT
        return UsageStatus.OK


@dataclass(frozen=True)
class UpgradePrompt:
    capability: Capability
    current_tier: Tier
    required_tier: Tier
    plan: PlanInfo


@dataclass(frozen=True)
class EntitlementSummary:
    tier: Tier
    limits: Limits
    services: QuotaDecision
    photos: QuotaDecision
    capabilities: Dict[Capability, bool]
    upgrades: Dict[Capability, Tier]


class EntitlementResolver:
    """
    Stateless query layer over a tier -> Limits table.

    The table is validated on construction so a misconfigured deployment
    fails before it can answer a query. Pass validate=False only to exercise
    the defensive path of limits_for.
    """

    def __init__(
        self,
        table: Optional[LimitsTable] = None,
        *,
        tiers: Optional[Iterable[Tier]] = None,
        catalog: Optional[Mapping[Tier, PlanInfo]] = None,
        validate: bool = True,
    ):
        self._table = table if table is not None else default_limits_table()
        self._tiers: Tuple[Tier, ...] = tuple(tiers) if tiers is not None else Tier.ordered()
        self._catalog = catalog if catalog is not None else DEFAULT_PLAN_CATALOG
        if validate:
            try:
                validate_limits_table(self._table, self._tiers)
            except ConfigError as exc:
                logger.error(
                    "[entitlements] invalid limits table",
                    extra={"tier": exc.tier, "error_code": exc.code, "reason": exc.message},
                )
                raise

    @property
    def tiers(self) -> Tuple[Tier, ...]:
        return self._tiers

    @property
    def table(self) -> LimitsTable:
        return self._table

    def limits_for(self, tier: TierLike) -> Limits:
        parsed = Tier.parse(tier)
        limits = self._table.get(parsed)
        if limits is None:
            logger.error(
                "[entitlements] no limits registered for tier",
                extra={"tier": parsed.value, "error_code": ConfigError.code},
            )
            raise ConfigError(f"No limits registered for tier {parsed.value}", tier=parsed.value)
        return limits

    # Quotas

    def can_add_service(self, tier: TierLike, current_service_count: int) -> QuotaDecision:
        return self._quota(tier, "max_services", current_service_count)

    def can_add_photo(self, tier: TierLike, current_photo_count: int) -> QuotaDecision:
        return self._quota(tier, "max_photos", current_photo_count)

    def _quota(self, tier: TierLike, field: str, current: int) -> QuotaDecision:
        limits = self.limits_for(tier)
        limit = getattr(limits, field)
        usage = max(0, int(current))

        # UNBOUNDED is compared as a finite number; the flag only marks it for display
        decision = QuotaDecision(
            allowed=usage < limit,
            remaining=max(0, limit - usage),
            limit=limit,
            current_usage=usage,
            unbounded=is_unbounded(limit),
        )
        if not decision.allowed:
            log_event(
                "info",
                "[entitlements] quota reached",
                tier=Tier.parse(tier).value,
                event_type="quota_reached",
                extra={"quota": field, "limit": limit, "current_usage": usage},
            )
        return decision

    # Capability flags

    def can_view_financial_dashboard(self, tier: TierLike) -> bool:
        return self.limits_for(tier).has_financial_dashboard

    def can_use_ai_reports(self, tier: TierLike) -> bool:
        return self.limits_for(tier).has_ai_reports

    def can_manage_team(self, tier: TierLike) -> bool:
        return self.limits_for(tier).has_team_management

    def can_use_custom_domain(self, tier: TierLike) -> bool:
        return self.limits_for(tier).has_custom_domain

    def can_generate_service_descriptions(self, tier: TierLike) -> bool:
        """AI-written service descriptions ride on the AI reports entitlement."""
        return self.limits_for(tier).has_ai_reports

    # Upgrades

    def _satisfies(self, tier: Tier, capability: Capability, baseline: Limits) -> bool:
        limits = self.limits_for(tier)
        if capability.is_flag:
            return getattr(limits, capability.value)
        field = _QUOTA_FIELD_FOR[capability]
        return getattr(limits, field) > getattr(baseline, field)

    def next_tier_unlocking(self, tier: TierLike, capability: CapabilityLike) -> Optional[Tier]:
        """
        Cheapest tier above `tier` that unlocks `capability`.

        Returns None when the current tier already has it or no higher tier does.
        For more_services / more_photos the current tier "has it" when its quota
        is unbounded; a higher tier unlocks it by offering a strictly larger quota.
        """
        current = Tier.parse(tier)
        wanted = Capability.parse(capability)
        baseline = self.limits_for(current)

        if wanted.is_flag:
            if getattr(baseline, wanted.value):
                return None
        elif is_unbounded(getattr(baseline, _QUOTA_FIELD_FOR[wanted])):
            return None

        if current not in self._tiers:
            return None
        for candidate in self._tiers[self._tiers.index(current) + 1:]:
            if self._satisfies(candidate, wanted, baseline):
                return candidate
        return None

    def upgrade_prompt(self, tier: TierLike, capability: CapabilityLike) -> Optional[UpgradePrompt]:
        current = Tier.parse(tier)
        wanted = Capability.parse(capability)
        target = self.next_tier_unlocking(current, wanted)
        if target is None:
            return None
        log_event(
            "info",
            "[entitlements] upgrade prompted",
            tier=current.value,
            capability=wanted.value,
            event_type="upgrade_prompted",
            extra={"required_tier": target.value},
        )
        return UpgradePrompt(
            capability=wanted,
            current_tier=current,
            required_tier=target,
            plan=get_plan_info(target, self._catalog),
        )

    # Snapshot

    def summarize(self, snapshot: AccountSnapshot) -> EntitlementSummary:
        """Resolve everything the UI needs for one account in a single call."""
        with bind_account_id(snapshot.account_id):
            return self._summarize(snapshot)

    def _summarize(self, snapshot: AccountSnapshot) -> EntitlementSummary:
        tier = snapshot.tier
        limits = self.limits_for(tier)
        capabilities = {cap: bool(getattr(limits, cap.value)) for cap in Capability if cap.is_flag}
        upgrades: Dict[Capability, Tier] = {}
        for cap in Capability:
            target = self.next_tier_unlocking(tier, cap)
            if target is not None:
                upgrades[cap] = target
        return EntitlementSummary(
            tier=tier,
            limits=limits,
            services=self.can_add_service(tier, snapshot.service_count),
            photos=self.can_add_photo(tier, snapshot.photo_count),
            capabilities=capabilities,
            upgrades=upgrades,
        )
