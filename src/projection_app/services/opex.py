"""
Operating expenses: fixed sub-accounts plus revenue-percentage sub-accounts.

Percentages are stored as WHOLE NUMBERS: ``percent_of_revenue = 6`` means 6%
of revenue, not 0.06. Every other rate in the engine is a decimal fraction
(``cpi_rate = 0.03``), so the variable amount is always
``revenue * percent_of_revenue / 100``. Existing data depends on this
convention; migrating it to fractions needs a data migration, not a code
change here.

A percentage in (0, 1) is almost always a fraction typed by mistake.
``validate_opex_percentage`` flags it and the calculator logs a warning, but
the value is still applied as a whole-number percent.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Mapping, Optional, Sequence

from ..core.decimals import HUNDRED, ONE, ZERO, DecimalKernel, Numeric, resolve_kernel
from ..core.logging import get_logger
from ..core.result import ErrorCode, Result, guarded
from ..models.opex import OpexBreakdown, OpexKind, OpexLine, OpexSubAccount, OpexYear

logger = get_logger(__name__)


def _check_sub_account(sub_account: OpexSubAccount) -> Optional[Result]:
    if sub_account.is_fixed and sub_account.fixed_amount is None:
        return Result.failure(
            f"Fixed amount is required for fixed sub-account: {sub_account.name}",
            ErrorCode.MISSING_DATA,
            field="fixed_amount",
        )
    if not sub_account.is_fixed and sub_account.percent_of_revenue is None:
        return Result.failure(
            f"Percentage is required for variable sub-account: {sub_account.name}",
            ErrorCode.MISSING_DATA,
            field="percent_of_revenue",
        )
    return None


@guarded("calculate opex")
def calculate_opex_for_year(
    revenue: Numeric, sub_accounts: Sequence[OpexSubAccount], kernel: Optional[DecimalKernel] = None
) -> Result[OpexBreakdown]:
    kernel = resolve_kernel(kernel)
    revenue_value = kernel.to_decimal(revenue)
    if revenue_value < 0:
        return Result.failure("Revenue cannot be negative", ErrorCode.NEGATIVE_VALUE, field="revenue")

    variable_opex = ZERO
    fixed_opex = ZERO
    breakdown: List[OpexLine] = []
    for sub_account in sub_accounts:
        invalid = _check_sub_account(sub_account)
        if invalid:
            return invalid.propagate()

        if sub_account.is_fixed:
            amount = kernel.to_decimal(sub_account.fixed_amount)
            if amount < 0:
                return Result.failure(
                    f"Fixed amount cannot be negative for sub-account: {sub_account.name}",
                    ErrorCode.NEGATIVE_VALUE,
                    field="fixed_amount",
                )
            fixed_opex = kernel.add(fixed_opex, amount)
            breakdown.append(OpexLine(name=sub_account.name, amount=amount, kind=OpexKind.FIXED))
            continue

        percent = kernel.to_decimal(sub_account.percent_of_revenue)
        if percent < 0 or percent > HUNDRED:
            return Result.failure(
                f"Percentage must be between 0 and 100 for sub-account: {sub_account.name}. "
                f"Got: {percent}. Remember: Enter 6 for 6%, not 0.06.",
                ErrorCode.INVALID_PERCENTAGE,
                field="percent_of_revenue",
            )
        if ZERO < percent < ONE:
            logger.warning("opex_percent_looks_fractional", sub_account=sub_account.name, percent=str(percent))
        amount = kernel.multiply(revenue_value, kernel.divide(percent, HUNDRED))
        variable_opex = kernel.add(variable_opex, amount)
        breakdown.append(OpexLine(name=sub_account.name, amount=amount, kind=OpexKind.VARIABLE))

    return Result.success(
        OpexBreakdown(
            variable_opex=variable_opex,
            fixed_opex=fixed_opex,
            total_opex=kernel.add(variable_opex, fixed_opex),
            breakdown=breakdown,
        )
    )


@guarded("calculate opex")
def calculate_opex(
    revenue_by_year: Mapping[int, Numeric],
    sub_accounts: Sequence[OpexSubAccount],
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[OpexYear]]:
    kernel = resolve_kernel(kernel)
    if not revenue_by_year:
        return Result.failure("Revenue data is required", ErrorCode.MISSING_DATA, field="revenue_by_year")
    for sub_account in sub_accounts:
        invalid = _check_sub_account(sub_account)
        if invalid:
            return invalid.propagate()

    rows: List[OpexYear] = []
    for year in sorted(revenue_by_year):
        revenue = kernel.to_decimal(revenue_by_year[year])
        opex = calculate_opex_for_year(revenue, sub_accounts, kernel=kernel)
        if opex.is_failure:
            return opex.propagate()
        rows.append(OpexYear(year=year, revenue=revenue, **opex.data.model_dump()))
    return Result.success(rows)


def format_opex_percentage(value: Numeric, kernel: Optional[DecimalKernel] = None) -> str:
    kernel = resolve_kernel(kernel)
    return f"{kernel.round(value, 2):.2f}%"


def validate_opex_percentage(value: Numeric, kernel: Optional[DecimalKernel] = None) -> Optional[str]:
    kernel = resolve_kernel(kernel)
    try:
        percent = kernel.to_decimal(value)
    except (ArithmeticError, ValueError, TypeError):
        return "Invalid number"
    if percent < 0 or percent > HUNDRED:
        return "Must be between 0 and 100"
    if ZERO < percent < ONE:
        return "Enter as whole number (e.g., 6 for 6%, not 0.06)"
    return None
