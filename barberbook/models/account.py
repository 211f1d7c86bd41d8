"""
barberbook/models/account.py

Account snapshot supplied by the caller on every query.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from barberbook.models.tier import Tier


class AccountSnapshot(BaseModel):
    """
    Current tier plus usage counts for one account.

    Never stored by the resolver. Negative counts are clamped to zero.
    """
    model_config = ConfigDict(frozen=True)

    tier: Tier
    service_count: int = 0
    photo_count: int = 0
    account_id: Optional[str] = None

    @field_validator("tier", mode="before")
    @classmethod
    def _parse_tier(cls, value):
        return Tier.parse(value)

    @field_validator("service_count", "photo_count")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return max(0, value)
