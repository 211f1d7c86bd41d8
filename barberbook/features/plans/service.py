"""
barberbook/features/plans/service.py

Plan table and catalog.

Handles:
- Default tier limits (FREE, PRO, BUSINESS)
- Plans page metadata (name, price label, feature bullets)
- Building and validating an immutable limits table from raw configuration
- Loading a JSON override of the table
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from barberbook.core.errors import ConfigError, ValidationError
from barberbook.models.limits import LOCKED_LIMITS, UNBOUNDED, Limits, is_unbounded
from barberbook.models.plan import PlanInfo
from barberbook.models.tier import Tier


logger = logging.getLogger("barberbook")

# Limits above this are shown as "∞" on the services page.
DISPLAY_UNLIMITED_THRESHOLD = 100

LimitsTable = Mapping[Tier, Limits]

# Default plan limits. Commission is 0 for every tier in the current data.
DEFAULT_PLAN_LIMITS: Dict[str, Dict[str, Any]] = {
    "FREE": {
        "max_services": 5,
        "max_photos": 10,
        "commission_rate": 0,
        "has_financial_dashboard": False,
        "has_custom_domain": False,
        "has_team_management": False,
        "has_ai_reports": False,
    },
    "PRO": {
        "max_services": UNBOUNDED,
        "max_photos": UNBOUNDED,
        "commission_rate": 0,
        "has_financial_dashboard": True,
        "has_custom_domain": True,
        "has_team_management": False,
        "has_ai_reports": True,
    },
    "BUSINESS": {
        "max_services": UNBOUNDED,
        "max_photos": UNBOUNDED,
        "commission_rate": 0,
        "has_financial_dashboard": True,
        "has_custom_domain": True,
        "has_team_management": True,
        "has_ai_reports": True,
    },
}

DEFAULT_PLAN_CATALOG: Mapping[Tier, PlanInfo] = MappingProxyType({
    Tier.FREE: PlanInfo(
        tier=Tier.FREE,
        name="Starter",
        price_label="R$ 0",
        features=("5 Serviços Max", "10 Fotos Portfólio", "0% Taxa por Agenda", "Agenda Básica", "Sem Dashboard"),
    ),
    Tier.PRO: PlanInfo(
        tier=Tier.PRO,
        name="Pro",
        price_label="R$ 49/mês",
        features=(
            "Serviços Ilimitados",
            "Fotos Ilimitadas",
            "0% Taxa por Agenda",
            "Dashboard Financeiro",
            "Link Personalizado",
            "Relatórios IA",
        ),
    ),
    Tier.BUSINESS: PlanInfo(
        tier=Tier.BUSINESS,
        name="Business",
        price_label="R$ 129/mês",
        features=("Tudo do Pro", "Múltiplos Barbeiros", "Gestão de Comissões", "Suporte Prioritário", "Acesso API"),
    ),
})

_FLAG_FIELDS = ("has_financial_dashboard", "has_custom_domain", "has_team_management", "has_ai_reports")
_QUOTA_FIELDS = ("max_services", "max_photos")


def build_limits_table(raw: Mapping[Union[Tier, str], Any]) -> LimitsTable:
    """
    Build an immutable limits table from raw configuration.

    Args:
        raw: tier name (or Tier) -> dict of limit fields (snake_case or camelCase),
             or an existing Limits instance

    Returns:
        Read-only mapping Tier -> Limits

    Raises:
        ConfigError: unknown tier key or invalid limit values
    """
    table: Dict[Tier, Limits] = {}
    for key, value in raw.items():
        try:
            tier = Tier.parse(key)
        except ValidationError as exc:
            raise ConfigError(f"Limits table has an entry for an unknown tier: {key!r}", tier=str(key)) from exc
        if isinstance(value, Limits):
            table[tier] = value
            continue
        try:
            table[tier] = Limits.model_validate(value)
        except PydanticValidationError as exc:
            raise ConfigError(f"Invalid limits for tier {tier.value}: {exc}", tier=tier.value) from exc
    return MappingProxyType(table)


def validate_limits_table(table: LimitsTable, tiers: Optional[Iterable[Tier]] = None) -> None:
    """
    Check that the table is total over the tier order and monotonic.

    A higher tier must never have a stricter quota or lose a capability flag.

    Raises:
        ConfigError: on the first violation found
    """
    ordered = tuple(tiers) if tiers is not None else Tier.ordered()

    missing = [t.value for t in ordered if t not in table]
    if missing:
        raise ConfigError(f"Limits table is missing tiers: {', '.join(missing)}", tier=missing[0])

    for lower, higher in zip(ordered, ordered[1:]):
        lo, hi = table[lower], table[higher]
        for field in _QUOTA_FIELDS:
            lo_value, hi_value = getattr(lo, field), getattr(hi, field)
            if is_unbounded(lo_value) and is_unbounded(hi_value):
                continue
            if hi_value < lo_value:
                raise ConfigError(
                    f"{field} decreases from {lower.value} ({lo_value}) to {higher.value} ({hi_value})",
                    tier=higher.value,
                )
        for field in _FLAG_FIELDS:
            if getattr(lo, field) and not getattr(hi, field):
                raise ConfigError(
                    f"{field} is enabled for {lower.value} but not for {higher.value}",
                    tier=higher.value,
                )


def default_limits_table() -> LimitsTable:
    return build_limits_table(DEFAULT_PLAN_LIMITS)


def load_limits_table(path: Union[str, Path]) -> LimitsTable:
    """Load a limits table from a JSON object keyed by tier name."""
    table_path = Path(path)
    try:
        raw = json.loads(table_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read limits table from {table_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Limits table in {table_path} must be a JSON object keyed by tier")
    logger.info("[plans] loaded limits table override", extra={"path": str(table_path), "tiers": sorted(raw)})
    return build_limits_table(raw)


def restrictive_limits_table(table: LimitsTable, tiers: Optional[Iterable[Tier]] = None) -> LimitsTable:
    """
    Map every tier to the lowest tier's limits.

    Falls back to a fully locked record when the lowest tier has no entry.
    """
    ordered = tuple(tiers) if tiers is not None else Tier.ordered()
    floor = table.get(ordered[0], LOCKED_LIMITS) if ordered else LOCKED_LIMITS
    return MappingProxyType({tier: floor for tier in ordered})


def get_plan_info(tier: Union[Tier, str], catalog: Optional[Mapping[Tier, PlanInfo]] = None) -> PlanInfo:
    """Get plans page metadata for a tier."""
    plans = catalog if catalog is not None else DEFAULT_PLAN_CATALOG
    parsed = Tier.parse(tier)
    if parsed not in plans:
        raise ConfigError(f"Plan catalog has no entry for tier {parsed.value}", tier=parsed.value)
    return plans[parsed]


def format_limit(value: int) -> str:
    """Render a quota for display: '∞' for effectively unlimited values."""
    if value > DISPLAY_UNLIMITED_THRESHOLD:
        return "∞"
    return str(value)
