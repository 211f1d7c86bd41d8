"""
barberbook/models/tier.py

Subscription tiers and the capability names used for upgrade prompts.
"""

from enum import Enum
from typing import Tuple, Union

from barberbook.core.errors import ValidationError


class Tier(str, Enum):
    """
    Subscription tier, declared in increasing order of capability.

    Declaration order is the tier order: FREE < PRO < BUSINESS.
    """
    FREE = "FREE"
    PRO = "PRO"
    BUSINESS = "BUSINESS"

    @classmethod
    def ordered(cls) -> Tuple["Tier", ...]:
        return tuple(cls)

    @property
    def rank(self) -> int:
        return Tier.ordered().index(self)

    # Compare by capability rank, never by the string value
    def __lt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: Union["Tier", str]) -> "Tier":
        if isinstance(value, Tier):
            return value
        raw = str(value or "").strip().upper()
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(f"Unknown tier: {value!r}") from None


class Capability(str, Enum):
    """Something a higher tier can unlock."""
    HAS_FINANCIAL_DASHBOARD = "has_financial_dashboard"
    HAS_CUSTOM_DOMAIN = "has_custom_domain"
    HAS_TEAM_MANAGEMENT = "has_team_management"
    HAS_AI_REPORTS = "has_ai_reports"
    MORE_SERVICES = "more_services"
    MORE_PHOTOS = "more_photos"

    @property
    def is_flag(self) -> bool:
        return self.value.startswith("has_")

    @classmethod
    def parse(cls, value: Union["Capability", str]) -> "Capability":
        """Accept snake_case values and the camelCase spelling (hasAIReports, moreServices)."""
        if isinstance(value, Capability):
            return value
        raw = str(value or "").strip()
        key = _CAMEL_ALIASES.get(raw, raw.lower())
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(f"Unknown capability: {value!r}") from None


_CAMEL_ALIASES = {
    "hasFinancialDashboard": Capability.HAS_FINANCIAL_DASHBOARD.value,
    "hasCustomDomain": Capability.HAS_CUSTOM_DOMAIN.value,
    "hasTeamManagement": Capability.HAS_TEAM_MANAGEMENT.value,
    "hasAIReports": Capability.HAS_AI_REPORTS.value,
    "moreServices": Capability.MORE_SERVICES.value,
    "morePhotos": Capability.MORE_PHOTOS.value,
}
