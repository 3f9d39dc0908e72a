from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CapexItem(BaseModel):
    year: int
    amount: Decimal
    category: Optional[str] = None
    rule_id: Optional[str] = None


class CapexRule(BaseModel):
    id: str
    category: str
    cycle_years: int = Field(..., description="Years between reinvestments (1 to 50)")
    base_cost: Decimal = Field(..., description="Cost in starting_year money, inflated by CPI for later cycles")
    starting_year: int
