from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.config import PROJECTION_START_YEAR
from .admin import AdminSettings
from .capex import CapexItem, CapexRule
from .curriculum import CurriculumPlan
from .opex import OpexSubAccount
from .rent import RentPlan
from .revenue import OtherRevenue


class ProjectionInput(BaseModel):
    curriculum_plans: List[CurriculumPlan]
    rent_plan: Optional[RentPlan] = None
    staff_cost_base: Optional[Decimal] = Field(
        None, description="Annual staff cost at staff_cost_base_year; derived from curriculum staffing when omitted"
    )
    staff_cost_cpi_frequency: int = 1
    staff_cost_base_year: int = PROJECTION_START_YEAR
    opex_sub_accounts: List[OpexSubAccount] = Field(default_factory=list)
    capex_items: List[CapexItem] = Field(default_factory=list)
    capex_rules: List[CapexRule] = Field(default_factory=list)
    other_revenue: List[OtherRevenue] = Field(default_factory=list)
    interest_by_year: Dict[int, Decimal] = Field(default_factory=dict)
    admin_settings: AdminSettings
