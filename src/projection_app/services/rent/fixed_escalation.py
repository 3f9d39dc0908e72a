from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from ...core.config import MAX_YEAR
from ...core.decimals import ONE, DecimalKernel, Numeric, resolve_kernel
from ...core.result import ErrorCode, Result, guarded
from ...models.rent import FixedEscalationParams, FixedEscalationYear
from ..escalation import check_year_range

RENT_FREQUENCIES = (1, 2, 3, 4, 5)


def check_rent_frequency(frequency: int) -> Optional[Result]:
    if frequency not in RENT_FREQUENCIES:
        return Result.failure(
            "Frequency must be 1, 2, 3, 4, or 5 years", ErrorCode.INVALID_FREQUENCY, field="frequency"
        )
    return None


def escalation_factor(
    rate: Numeric, frequency: int, start_year: int, year: int, kernel: DecimalKernel
) -> Decimal:
    periods = (year - start_year) // frequency
    return kernel.power(kernel.add(ONE, rate), periods)


def _check_params(params: FixedEscalationParams) -> Optional[Result]:
    if params.base_rent <= 0:
        return Result.failure("Base rent must be positive", ErrorCode.INVALID_INPUT, field="base_rent")
    if params.escalation_rate < 0:
        return Result.failure("Escalation rate cannot be negative", ErrorCode.INVALID_INPUT, field="escalation_rate")
    return check_rent_frequency(params.frequency)


@guarded("calculate fixed escalation rent")
def calculate_fixed_escalation_rent_for_year(
    params: FixedEscalationParams, year: int, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    invalid = _check_params(params)
    if invalid:
        return invalid.propagate()
    if year < params.start_year:
        return Result.failure("Year must be >= start year", ErrorCode.INVALID_YEAR_RANGE, field="year")
    if year > MAX_YEAR:
        return Result.failure(f"Year must be <= {MAX_YEAR}", ErrorCode.YEAR_OUT_OF_RANGE, field="year")

    factor = escalation_factor(params.escalation_rate, params.frequency, params.start_year, year, kernel)
    return Result.success(kernel.multiply(params.base_rent, factor))


@guarded("calculate fixed escalation rent")
def calculate_fixed_escalation_rent(
    params: FixedEscalationParams, kernel: Optional[DecimalKernel] = None
) -> Result[List[FixedEscalationYear]]:
    kernel = resolve_kernel(kernel)
    invalid = check_year_range(params.start_year, params.end_year) or _check_params(params)
    if invalid:
        return invalid.propagate()

    rows: List[FixedEscalationYear] = []
    for year in range(params.start_year, params.end_year + 1):
        factor = escalation_factor(params.escalation_rate, params.frequency, params.start_year, year, kernel)
        rows.append(
            FixedEscalationYear(year=year, rent=kernel.multiply(params.base_rent, factor), escalation_factor=factor)
        )
    return Result.success(rows)


def calculate_fixed_escalation_total_rent(
    params: FixedEscalationParams, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    rows = calculate_fixed_escalation_rent(params, kernel=kernel)
    if rows.is_failure:
        return rows.propagate()
    return Result.success(kernel.sum(row.rent for row in rows.data))
