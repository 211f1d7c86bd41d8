"""Error taxonomy for the entitlement core."""

from typing import Optional


class AppError(Exception):
    code = "app_error"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(AppError, ValueError):
    """Raised when a caller-supplied tier or capability name does not parse."""
    code = "validation_error"


class ConfigError(AppError):
    """
    Raised when the limits table is unusable.

    Covers a tier with no registered Limits record, a monotonicity violation,
    out-of-range values in a raw table, and an unreadable override file.
    Treated as fatal at startup.
    """
    code = "config_error"

    def __init__(self, message: str, *, code: Optional[str] = None, tier: Optional[str] = None):
        super().__init__(message, code=code)
        self.tier = tier
