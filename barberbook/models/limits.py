"""
barberbook/models/limits.py

Limits model: the quotas and capability flags attached to a tier.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# Sentinel for "unlimited" quotas. Any limit at or above it is treated as unbounded.
UNBOUNDED = 9999


def is_unbounded(limit: int) -> bool:
    return limit >= UNBOUNDED


class Limits(BaseModel):
    """
    Limits represents what a tier allows.

    Fields:
    - max_services (int): catalog entries a provider may list (UNBOUNDED = unlimited)
    - max_photos (int): portfolio images a provider may upload
    - commission_rate (Decimal): percentage of booking revenue, 0-100
    - has_financial_dashboard, has_custom_domain, has_team_management,
      has_ai_reports (bool): capability flags

    Raw configuration may use the camelCase keys (maxServices, hasAIReports, ...).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    max_services: int = Field(alias="maxServices", ge=0)
    max_photos: int = Field(alias="maxPhotos", ge=0)
    commission_rate: Decimal = Field(default=Decimal("0"), alias="commissionRate", ge=0, le=100)
    has_financial_dashboard: bool = Field(default=False, alias="hasFinancialDashboard")
    has_custom_domain: bool = Field(default=False, alias="hasCustomDomain")
    has_team_management: bool = Field(default=False, alias="hasTeamManagement")
    has_ai_reports: bool = Field(default=False, alias="hasAIReports")


# Used when a deployment must degrade rather than refuse to start and no tier record survives.
LOCKED_LIMITS = Limits(max_services=0, max_photos=0)
