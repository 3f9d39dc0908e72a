from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AdminSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpi_rate: Decimal = Field(..., description="Annual inflation as a decimal fraction, e.g. 0.03")
    discount_rate: Decimal = Field(..., description="NPV discount rate as a decimal fraction")
    tax_rate: Optional[Decimal] = Field(None, description="Income tax rate; zakat_rate applies when unset")
    zakat_rate: Decimal = Decimal("0.025")

    def effective_tax_rate(self) -> Decimal:
        return self.tax_rate if self.tax_rate is not None else self.zakat_rate
