from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class OtherRevenue(BaseModel):
    year: int
    amount: Decimal


class EscalationYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    value: Decimal
    period: int


class TuitionYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    tuition: Decimal
    cpi_period: int


class RevenueYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    tuition: Decimal
    students: int
    revenue: Decimal
    other_revenue: Decimal
    total_revenue: Decimal
