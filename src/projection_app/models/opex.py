from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OpexSubAccount(BaseModel):
    name: str
    is_fixed: bool
    percent_of_revenue: Optional[Decimal] = Field(
        None,
        description="Share of revenue as a WHOLE-NUMBER percent: 6 means 6%, not 0.06. Used when is_fixed is false.",
    )
    fixed_amount: Optional[Decimal] = Field(None, description="Annual amount in SAR. Used when is_fixed is true.")


class OpexKind(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


class OpexLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    amount: Decimal
    kind: OpexKind


class OpexBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    variable_opex: Decimal
    fixed_opex: Decimal
    total_opex: Decimal
    breakdown: List[OpexLine]


class OpexYear(OpexBreakdown):
    year: int
    revenue: Decimal
