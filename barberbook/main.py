"""
Startup wiring for the entitlement core.

Builds the process-wide resolver once: configure logging, validate the
environment, load the limits table and validate it. A bad table either
stops startup or degrades every tier to the most restrictive limits,
depending on ENTITLEMENTS_ON_CONFIG_ERROR.
"""

import logging
from functools import lru_cache
from typing import Optional

from barberbook.core.config import Settings, get_log_level, settings
from barberbook.core.errors import ConfigError
from barberbook.core.logging import configure_logging
from barberbook.core.validation import validate_env
from barberbook.features.entitlements.service import EntitlementResolver
from barberbook.features.plans.service import (
    LimitsTable,
    default_limits_table,
    load_limits_table,
    restrictive_limits_table,
)


logger = logging.getLogger("barberbook")


def _load_table(cfg: Settings) -> LimitsTable:
    if cfg.ENTITLEMENTS_TABLE_PATH:
        return load_limits_table(cfg.ENTITLEMENTS_TABLE_PATH)
    return default_limits_table()


def create_resolver(settings_obj: Optional[Settings] = None, *, configure: bool = True) -> EntitlementResolver:
    """
    Build a validated EntitlementResolver from settings.

    Raises:
        EnvValidationError: settings are invalid
        ConfigError: the limits table is invalid and the mode is "fail"
    """
    cfg = settings_obj or settings
    if configure:
        configure_logging(cfg.ENV, level=get_log_level(cfg))
    validate_env(settings_obj=cfg)

    table: LimitsTable = {}
    try:
        table = _load_table(cfg)
        resolver = EntitlementResolver(table)
    except ConfigError as exc:
        mode = (cfg.ENTITLEMENTS_ON_CONFIG_ERROR or "fail").lower()
        logger.error(
            "[startup] entitlements misconfigured",
            extra={"error_code": exc.code, "tier": exc.tier, "mode": mode, "reason": exc.message},
        )
        if mode != "restrictive":
            raise
        # Every tier gets the lowest tier's record, or locked limits if none loaded
        return EntitlementResolver(restrictive_limits_table(table))

    logger.info("[startup] entitlements ready", extra={"tiers": [t.value for t in resolver.tiers]})
    return resolver


@lru_cache(maxsize=1)
def get_resolver() -> EntitlementResolver:
    """Process-wide resolver built from environment settings."""
    return create_resolver()
