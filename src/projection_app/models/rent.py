from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import PROJECTION_END_YEAR


class RentModel(str, Enum):
    FIXED_ESCALATION = "FIXED_ESCALATION"
    REVENUE_SHARE = "REVENUE_SHARE"
    PARTNER_MODEL = "PARTNER_MODEL"


class RentPlan(BaseModel):
    rent_model: RentModel
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Model-specific rent parameters")


class FixedEscalationParams(BaseModel):
    model: Literal[RentModel.FIXED_ESCALATION] = RentModel.FIXED_ESCALATION
    base_rent: Decimal
    escalation_rate: Decimal
    frequency: int = 1
    start_year: int
    end_year: int = PROJECTION_END_YEAR
    transition_rent: Decimal = Decimal(0)


class RevenueShareParams(BaseModel):
    model: Literal[RentModel.REVENUE_SHARE] = RentModel.REVENUE_SHARE
    revenue_by_year: Dict[int, Decimal]
    revenue_share_percent: Decimal = Field(..., description="Share of revenue as a decimal fraction, e.g. 0.08")
    transition_rent: Decimal = Decimal(0)

    @property
    def start_year(self) -> Optional[int]:
        return min(self.revenue_by_year) if self.revenue_by_year else None


class PartnerModelParams(BaseModel):
    model: Literal[RentModel.PARTNER_MODEL] = RentModel.PARTNER_MODEL
    land_size: Decimal
    land_price_per_sqm: Decimal
    bua_size: Decimal
    construction_cost_per_sqm: Decimal
    yield_base: Decimal
    growth_rate: Optional[Decimal] = None
    frequency: Optional[int] = None
    start_year: int
    end_year: int = PROJECTION_END_YEAR
    transition_rent: Decimal = Decimal(0)


RentParams = Annotated[
    Union[FixedEscalationParams, RevenueShareParams, PartnerModelParams],
    Field(discriminator="model"),
]


class FixedEscalationYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    rent: Decimal
    escalation_factor: Decimal


class RevenueShareYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    revenue: Decimal
    rent: Decimal
    rent_load: Decimal


class PartnerModelYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    land_value: Decimal
    construction_value: Decimal
    total_value: Decimal
    rent: Decimal


RentYear = Union[FixedEscalationYear, RevenueShareYear, PartnerModelYear]
