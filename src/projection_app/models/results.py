from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .insights import Insight


class StaffCostYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    staff_cost: Decimal
    cpi_period: int


class EbitdaYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    revenue: Decimal
    staff_cost: Decimal
    rent: Decimal
    opex: Decimal
    ebitda: Decimal
    ebitda_margin: Decimal


class CashFlowYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    ebitda: Decimal
    capex: Decimal
    interest: Decimal
    taxable_income: Decimal
    taxes: Decimal
    cash_flow: Decimal


class PresentValueYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    amount: Decimal
    discount_factor: Decimal
    present_value: Decimal


class NPVResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    npv: Decimal
    present_values: List[PresentValueYear]
    total_years: int
    discount_rate: Decimal


class YearlyProjection(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    revenue: Decimal
    staff_cost: Decimal
    rent: Decimal
    opex: Decimal
    ebitda: Decimal
    ebitda_margin: Decimal
    capex: Decimal
    interest: Decimal
    taxes: Decimal
    cash_flow: Decimal
    rent_load: Decimal
    tuition_by_curriculum: Dict[str, Decimal]
    students_by_curriculum: Dict[str, int]


class ProjectionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_revenue: Decimal
    total_staff_cost: Decimal
    total_rent: Decimal
    total_opex: Decimal
    total_ebitda: Decimal
    total_capex: Decimal
    total_interest: Decimal
    total_taxes: Decimal
    total_cash_flow: Decimal
    avg_ebitda_margin: Decimal
    avg_rent_load: Decimal
    npv_rent: Decimal
    npv_cash_flow: Decimal


class ProjectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    years: List[YearlyProjection]
    summary: ProjectionSummary
    insights: List[Insight] = Field(default_factory=list)
    duration_ms: float
