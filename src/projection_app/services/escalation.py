from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from ..core.config import MAX_YEAR, MIN_YEAR
from ..core.decimals import ONE, DecimalKernel, Numeric, resolve_kernel
from ..core.logging import get_logger
from ..core.result import ErrorCode, Result, guarded
from ..models.revenue import EscalationYear, TuitionYear

logger = get_logger(__name__)

CPI_FREQUENCIES = (1, 2, 3)


def _check_inputs(base: Decimal, rate: Decimal, frequency: int) -> Optional[Result]:
    if base <= 0:
        return Result.failure("Base value must be positive", ErrorCode.INVALID_INPUT, field="base")
    if rate < 0:
        return Result.failure("Escalation rate cannot be negative", ErrorCode.INVALID_INPUT, field="rate")
    if frequency not in CPI_FREQUENCIES:
        return Result.failure("CPI frequency must be 1, 2, or 3 years", ErrorCode.INVALID_FREQUENCY, field="frequency")
    return None


def check_year_range(start_year: int, end_year: int) -> Optional[Result]:
    if start_year < MIN_YEAR or start_year > MAX_YEAR or end_year > MAX_YEAR:
        return Result.failure(
            f"Years must be between {MIN_YEAR} and {MAX_YEAR}",
            ErrorCode.YEAR_OUT_OF_RANGE,
            details={"start_year": start_year, "end_year": end_year},
        )
    if start_year > end_year:
        return Result.failure("Start year must be <= end year", ErrorCode.INVALID_YEAR_RANGE, field="start_year")
    return None


@guarded("escalate value")
def escalate(
    base: Numeric,
    rate: Numeric,
    frequency: int,
    base_year: int,
    year: int,
    kernel: Optional[DecimalKernel] = None,
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    base_value = kernel.to_decimal(base)
    rate_value = kernel.to_decimal(rate)

    invalid = _check_inputs(base_value, rate_value, frequency)
    if invalid:
        return invalid.propagate()
    if year < base_year:
        return Result.failure("Year must be >= base year", ErrorCode.INVALID_YEAR_RANGE, field="year")

    periods = (year - base_year) // frequency
    factor = kernel.power(kernel.add(ONE, rate_value), periods)
    return Result.success(kernel.multiply(base_value, factor))


@guarded("calculate escalation series")
def calculate_escalation_series(
    base: Numeric,
    rate: Numeric,
    frequency: int,
    base_year: int,
    start_year: int,
    end_year: int,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[EscalationYear]]:
    kernel = resolve_kernel(kernel)
    invalid = check_year_range(start_year, end_year)
    if invalid:
        return invalid.propagate()
    if base_year > start_year:
        return Result.failure("Base year must be <= start year", ErrorCode.INVALID_YEAR_RANGE, field="base_year")

    base_value = kernel.to_decimal(base)
    rate_value = kernel.to_decimal(rate)
    invalid = _check_inputs(base_value, rate_value, frequency)
    if invalid:
        return invalid.propagate()

    growth = kernel.add(ONE, rate_value)
    rows: List[EscalationYear] = []
    for year in range(start_year, end_year + 1):
        period = (year - base_year) // frequency
        value = kernel.multiply(base_value, kernel.power(growth, period))
        rows.append(EscalationYear(year=year, value=value, period=period))

    logger.debug("escalation_series_calculated", years=len(rows), frequency=frequency)
    return Result.success(rows)


def calculate_tuition_growth(
    tuition_base: Numeric,
    cpi_rate: Numeric,
    cpi_frequency: int,
    base_year: int,
    start_year: int,
    end_year: int,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[TuitionYear]]:
    series = calculate_escalation_series(
        tuition_base, cpi_rate, cpi_frequency, base_year, start_year, end_year, kernel=kernel
    )
    if series.is_failure:
        return series.propagate()
    return Result.success(
        [TuitionYear(year=row.year, tuition=row.value, cpi_period=row.period) for row in series.data]
    )
