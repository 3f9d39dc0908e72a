from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from ...core.config import MAX_YEAR, MIN_YEAR
from ...core.decimals import HUNDRED, DecimalKernel, Numeric, resolve_kernel
from ...core.result import ErrorCode, Result, guarded
from ...models.rent import RevenueShareParams, RevenueShareYear


def _check_share(share: Decimal) -> Optional[Result]:
    if share < 0 or share > 1:
        return Result.failure(
            "Revenue share must be between 0 and 1 (0% to 100%)",
            ErrorCode.INVALID_PERCENTAGE,
            field="revenue_share_percent",
        )
    return None


@guarded("calculate revenue share rent")
def calculate_revenue_share_rent_for_year(
    revenue: Numeric, revenue_share_percent: Numeric, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    revenue_value = kernel.to_decimal(revenue)
    share = kernel.to_decimal(revenue_share_percent)
    if revenue_value < 0:
        return Result.failure("Revenue cannot be negative", ErrorCode.NEGATIVE_VALUE, field="revenue")
    invalid = _check_share(share)
    if invalid:
        return invalid.propagate()
    return Result.success(kernel.multiply(revenue_value, share))


@guarded("calculate revenue share rent")
def calculate_revenue_share_rent(
    params: RevenueShareParams, kernel: Optional[DecimalKernel] = None
) -> Result[List[RevenueShareYear]]:
    kernel = resolve_kernel(kernel)
    if not params.revenue_by_year:
        return Result.failure("Revenue data is required", ErrorCode.MISSING_DATA, field="revenue_by_year")
    invalid = _check_share(params.revenue_share_percent)
    if invalid:
        return invalid.propagate()

    rows: List[RevenueShareYear] = []
    for year in sorted(params.revenue_by_year):
        revenue = params.revenue_by_year[year]
        if year < MIN_YEAR or year > MAX_YEAR:
            return Result.failure(
                f"Years must be between {MIN_YEAR} and {MAX_YEAR}", ErrorCode.YEAR_OUT_OF_RANGE, field="year"
            )
        if revenue < 0:
            return Result.failure(
                f"Revenue for year {year} cannot be negative", ErrorCode.NEGATIVE_VALUE, field="revenue_by_year"
            )
        rent = kernel.multiply(revenue, params.revenue_share_percent)
        rows.append(
            RevenueShareYear(
                year=year,
                revenue=revenue,
                rent=rent,
                rent_load=kernel.multiply(kernel.divide(rent, revenue), HUNDRED),
            )
        )
    return Result.success(rows)


def calculate_revenue_share_total_rent(
    params: RevenueShareParams, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    rows = calculate_revenue_share_rent(params, kernel=kernel)
    if rows.is_failure:
        return rows.propagate()
    return Result.success(kernel.sum(row.rent for row in rows.data))
