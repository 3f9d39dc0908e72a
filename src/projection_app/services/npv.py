from __future__ import annotations

from decimal import Decimal
from typing import List, Mapping, Optional

from ..core.config import MAX_YEAR, MIN_YEAR, NPV_BASE_YEAR, NPV_END_YEAR, NPV_START_YEAR
from ..core.decimals import ONE, DecimalKernel, Numeric, resolve_kernel
from ..core.result import ErrorCode, Result, guarded
from ..models.results import NPVResult, PresentValueYear
from .escalation import check_year_range


def _check_rate(rate: Decimal) -> Optional[Result]:
    if rate < 0 or rate > 1:
        return Result.failure(
            "Discount rate must be between 0 and 1 (0% to 100%)", ErrorCode.INVALID_PERCENTAGE, field="discount_rate"
        )
    return None


@guarded("calculate present value")
def calculate_present_value(
    amount: Numeric,
    year: int,
    discount_rate: Numeric,
    base_year: int = NPV_BASE_YEAR,
    kernel: Optional[DecimalKernel] = None,
) -> Result[PresentValueYear]:
    kernel = resolve_kernel(kernel)
    amount_value = kernel.to_decimal(amount)
    rate = kernel.to_decimal(discount_rate)
    if year < MIN_YEAR or year > MAX_YEAR:
        return Result.failure(
            f"Year must be between {MIN_YEAR} and {MAX_YEAR}", ErrorCode.YEAR_OUT_OF_RANGE, field="year"
        )
    invalid = _check_rate(rate)
    if invalid:
        return invalid.propagate()
    if year < base_year:
        return Result.failure("Year must be >= base year", ErrorCode.INVALID_YEAR_RANGE, field="year")

    factor = kernel.power(kernel.add(ONE, rate), year - base_year)
    return Result.success(
        PresentValueYear(
            year=year,
            amount=amount_value,
            discount_factor=factor,
            present_value=kernel.divide(amount_value, factor),
        )
    )


@guarded("calculate NPV")
def calculate_npv(
    amounts_by_year: Mapping[int, Numeric],
    discount_rate: Numeric,
    start_year: int = NPV_START_YEAR,
    end_year: int = NPV_END_YEAR,
    base_year: int = NPV_BASE_YEAR,
    kernel: Optional[DecimalKernel] = None,
) -> Result[NPVResult]:
    kernel = resolve_kernel(kernel)
    invalid = check_year_range(start_year, end_year)
    if invalid:
        return invalid.propagate()
    if start_year < base_year:
        return Result.failure("Start year must be >= base year", ErrorCode.INVALID_YEAR_RANGE, field="start_year")
    rate = kernel.to_decimal(discount_rate)
    invalid = _check_rate(rate)
    if invalid:
        return invalid.propagate()
    if not amounts_by_year:
        return Result.failure("At least one year of data is required", ErrorCode.MISSING_DATA)

    present_values: List[PresentValueYear] = []
    for year in range(start_year, end_year + 1):
        if year not in amounts_by_year:
            continue
        pv = calculate_present_value(amounts_by_year[year], year, rate, base_year, kernel=kernel)
        if pv.is_failure:
            return pv.propagate()
        present_values.append(pv.data)

    if not present_values:
        return Result.failure("No valid data found for the specified year range", ErrorCode.NO_DATA_IN_RANGE)

    return Result.success(
        NPVResult(
            npv=kernel.sum(pv.present_value for pv in present_values),
            present_values=present_values,
            total_years=len(present_values),
            discount_rate=rate,
        )
    )
