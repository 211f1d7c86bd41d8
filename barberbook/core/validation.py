"""
Environment validation utilities.

Ensures entitlements fail fast on misconfiguration while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import logging
import os
from typing import Optional

from barberbook.core.config import settings

ALLOWED_ENVS = {"development", "test", "production"}
CONFIG_ERROR_MODES = {"fail", "restrictive"}


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to barberbook.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()
    if mode not in ALLOWED_ENVS:
        raise EnvValidationError(f"ENV must be one of {sorted(ALLOWED_ENVS)}, got {mode!r}")

    level = str(getattr(cfg, "LOG_LEVEL", "INFO") or "INFO").upper()
    if not isinstance(getattr(logging, level, None), int):
        raise EnvValidationError(f"LOG_LEVEL {level!r} is not a logging level")

    on_error = (getattr(cfg, "ENTITLEMENTS_ON_CONFIG_ERROR", "fail") or "fail").lower()
    if on_error not in CONFIG_ERROR_MODES:
        raise EnvValidationError(
            f"ENTITLEMENTS_ON_CONFIG_ERROR must be one of {sorted(CONFIG_ERROR_MODES)}, got {on_error!r}"
        )

    return True
