from __future__ import annotations

from decimal import Decimal
from typing import List, Mapping, Optional, Tuple

from ..core.decimals import HUNDRED, DecimalKernel, Numeric, resolve_kernel
from ..core.result import ErrorCode, Result, guarded
from ..models.results import EbitdaYear


@guarded("calculate EBITDA")
def calculate_ebitda_for_year(
    revenue: Numeric,
    staff_cost: Numeric,
    rent: Numeric,
    opex: Numeric,
    kernel: Optional[DecimalKernel] = None,
) -> Result[Tuple[Decimal, Decimal]]:
    """Return ``(ebitda, ebitda_margin)``; the margin is a percent and 0 on zero revenue."""
    kernel = resolve_kernel(kernel)
    values = {
        "revenue": kernel.to_decimal(revenue),
        "staff_cost": kernel.to_decimal(staff_cost),
        "rent": kernel.to_decimal(rent),
        "opex": kernel.to_decimal(opex),
    }
    for name, value in values.items():
        if value < 0:
            label = name.replace("_", " ").capitalize()
            return Result.failure(f"{label} cannot be negative", ErrorCode.NEGATIVE_VALUE, field=name)

    ebitda = kernel.subtract(
        kernel.subtract(kernel.subtract(values["revenue"], values["staff_cost"]), values["rent"]),
        values["opex"],
    )
    margin = kernel.multiply(kernel.divide(ebitda, values["revenue"]), HUNDRED)
    return Result.success((ebitda, margin))


@guarded("calculate EBITDA")
def calculate_ebitda(
    revenue_by_year: Mapping[int, Numeric],
    staff_cost_by_year: Mapping[int, Numeric],
    rent_by_year: Mapping[int, Numeric],
    opex_by_year: Mapping[int, Numeric],
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[EbitdaYear]]:
    kernel = resolve_kernel(kernel)
    lengths = {len(revenue_by_year), len(staff_cost_by_year), len(rent_by_year), len(opex_by_year)}
    if len(lengths) != 1:
        return Result.failure("All input series must have the same length", ErrorCode.INVALID_INPUT)
    if not revenue_by_year:
        return Result.failure("At least one year of data is required", ErrorCode.MISSING_DATA)

    rows: List[EbitdaYear] = []
    for year in sorted(revenue_by_year):
        for label, series in (("Staff cost", staff_cost_by_year), ("Rent", rent_by_year), ("Opex", opex_by_year)):
            if year not in series:
                return Result.failure(f"{label} data not found for year {year}", ErrorCode.MISSING_DATA)

        revenue = kernel.to_decimal(revenue_by_year[year])
        staff_cost = kernel.to_decimal(staff_cost_by_year[year])
        rent = kernel.to_decimal(rent_by_year[year])
        opex = kernel.to_decimal(opex_by_year[year])
        result = calculate_ebitda_for_year(revenue, staff_cost, rent, opex, kernel=kernel)
        if result.is_failure:
            return result.propagate()
        ebitda, margin = result.data
        rows.append(
            EbitdaYear(
                year=year,
                revenue=revenue,
                staff_cost=staff_cost,
                rent=rent,
                opex=opex,
                ebitda=ebitda,
                ebitda_margin=margin,
            )
        )
    return Result.success(rows)
