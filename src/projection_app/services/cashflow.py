from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.decimals import ZERO, DecimalKernel, Numeric, resolve_kernel
from ..core.result import ErrorCode, Result, guarded
from ..models.capex import CapexItem
from ..models.results import CashFlowYear


@guarded("bucket capex")
def bucket_capex(items: Sequence[CapexItem], kernel: Optional[DecimalKernel] = None) -> Result[Dict[int, Decimal]]:
    kernel = resolve_kernel(kernel)
    buckets: Dict[int, Decimal] = {}
    for item in items:
        amount = kernel.to_decimal(item.amount)
        if amount < 0:
            return Result.failure(
                f"Capex amount cannot be negative for year {item.year}", ErrorCode.NEGATIVE_VALUE, field="capex_items"
            )
        buckets[item.year] = kernel.add(buckets.get(item.year), amount)
    return Result.success(buckets)


@guarded("calculate cash flow")
def calculate_cash_flow_for_year(
    ebitda: Numeric,
    capex: Numeric,
    interest: Optional[Numeric] = None,
    tax_rate: Numeric = ZERO,
    year: int = 0,
    kernel: Optional[DecimalKernel] = None,
) -> Result[CashFlowYear]:
    kernel = resolve_kernel(kernel)
    ebitda_value = kernel.to_decimal(ebitda)
    capex_value = kernel.to_decimal(capex)
    interest_value = ZERO if interest is None else kernel.to_decimal(interest)
    rate = kernel.to_decimal(tax_rate)

    if capex_value < 0:
        return Result.failure("Capex cannot be negative", ErrorCode.NEGATIVE_VALUE, field="capex")
    if interest_value < 0:
        return Result.failure("Interest cannot be negative", ErrorCode.NEGATIVE_VALUE, field="interest")
    if rate < 0 or rate > 1:
        return Result.failure(
            "Tax rate must be between 0 and 1 (0% to 100%)", ErrorCode.INVALID_PERCENTAGE, field="tax_rate"
        )

    taxable_income = kernel.subtract(ebitda_value, interest_value)
    taxes = kernel.multiply(kernel.max(ZERO, taxable_income), rate)
    cash_flow = kernel.subtract(kernel.subtract(kernel.subtract(ebitda_value, capex_value), interest_value), taxes)
    return Result.success(
        CashFlowYear(
            year=year,
            ebitda=ebitda_value,
            capex=capex_value,
            interest=interest_value,
            taxable_income=taxable_income,
            taxes=taxes,
            cash_flow=cash_flow,
        )
    )


@guarded("calculate cash flow")
def calculate_cash_flow(
    ebitda_by_year: Mapping[int, Numeric],
    capex_items: Sequence[CapexItem],
    interest_by_year: Optional[Mapping[int, Numeric]] = None,
    tax_rate: Numeric = ZERO,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[CashFlowYear]]:
    kernel = resolve_kernel(kernel)
    if not ebitda_by_year:
        return Result.failure("EBITDA data is required", ErrorCode.MISSING_DATA, field="ebitda_by_year")

    capex_by_year = bucket_capex(capex_items, kernel=kernel)
    if capex_by_year.is_failure:
        return capex_by_year.propagate()
    interest_by_year = interest_by_year or {}
    for year, interest in interest_by_year.items():
        if kernel.is_negative(interest):
            return Result.failure(
                f"Interest cannot be negative for year {year}", ErrorCode.NEGATIVE_VALUE, field="interest_by_year"
            )

    rows: List[CashFlowYear] = []
    for year in sorted(ebitda_by_year):
        result = calculate_cash_flow_for_year(
            ebitda_by_year[year],
            capex_by_year.data.get(year, ZERO),
            interest_by_year.get(year),
            tax_rate,
            year=year,
            kernel=kernel,
        )
        if result.is_failure:
            return result
        rows.append(result.data)
    return Result.success(rows)
