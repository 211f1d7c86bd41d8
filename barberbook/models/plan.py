"""
barberbook/models/plan.py

Plan model: the presentational side of a tier.
"""

from typing import Tuple
from pydantic import BaseModel, ConfigDict

from barberbook.models.tier import Tier


class PlanInfo(BaseModel):
    """
    PlanInfo describes how a tier is shown on the plans page.

    Plans do NOT include:
    - Limits (see Limits)
    - Billing cycles or payment methods
    """
    model_config = ConfigDict(frozen=True)

    tier: Tier
    name: str
    price_label: str
    features: Tuple[str, ...] = ()
