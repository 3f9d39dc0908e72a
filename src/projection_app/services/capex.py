from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.config import PROJECTION_END_YEAR, PROJECTION_START_YEAR
from ..core.decimals import ONE, DecimalKernel, Numeric, resolve_kernel
from ..core.logging import get_logger
from ..core.result import ErrorCode, Result, guarded
from ..models.capex import CapexItem, CapexRule

logger = get_logger(__name__)

MIN_CYCLE_YEARS = 1
MAX_CYCLE_YEARS = 50


@guarded("calculate capex from rule")
def calculate_capex_from_rule(
    rule: CapexRule,
    cpi_rate: Numeric,
    start_year: int = PROJECTION_START_YEAR,
    end_year: int = PROJECTION_END_YEAR,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[CapexItem]]:
    kernel = resolve_kernel(kernel)
    base_cost = kernel.to_decimal(rule.base_cost)
    rate = kernel.to_decimal(cpi_rate)

    if base_cost <= 0:
        return Result.failure("Base cost must be positive", ErrorCode.INVALID_INPUT, field="base_cost")
    if rate < 0:
        return Result.failure("CPI rate cannot be negative", ErrorCode.INVALID_INPUT, field="cpi_rate")
    if not MIN_CYCLE_YEARS <= rule.cycle_years <= MAX_CYCLE_YEARS:
        return Result.failure(
            f"Cycle years must be between {MIN_CYCLE_YEARS} and {MAX_CYCLE_YEARS}",
            ErrorCode.INVALID_FREQUENCY,
            field="cycle_years",
        )
    if not start_year <= rule.starting_year <= end_year:
        return Result.failure(
            f"Starting year must be between {start_year} and {end_year}",
            ErrorCode.YEAR_OUT_OF_RANGE,
            field="starting_year",
        )

    growth = kernel.add(ONE, rate)
    items: List[CapexItem] = []
    for year in range(rule.starting_year, end_year + 1, rule.cycle_years):
        amount = kernel.multiply(base_cost, kernel.power(growth, year - rule.starting_year))
        items.append(CapexItem(year=year, amount=amount, category=rule.category, rule_id=rule.id))
    return Result.success(items)


@guarded("calculate capex from rules")
def calculate_capex_from_rules(
    rules: Sequence[CapexRule],
    cpi_rate: Numeric,
    start_year: int = PROJECTION_START_YEAR,
    end_year: int = PROJECTION_END_YEAR,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[CapexItem]]:
    items: List[CapexItem] = []
    for rule in rules:
        result = calculate_capex_from_rule(rule, cpi_rate, start_year, end_year, kernel=kernel)
        if result.is_failure:
            logger.warning("capex_rule_rejected", rule_id=rule.id, code=result.code.value)
            return result
        items.extend(result.data)
    items.sort(key=lambda item: (item.year, item.category or ""))
    return Result.success(items)
