from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.decimals import ZERO, DecimalKernel, Numeric, resolve_kernel
from ..core.result import ErrorCode, Result, guarded
from ..models.revenue import OtherRevenue, RevenueYear, TuitionYear


@guarded("calculate revenue")
def calculate_revenue_for_year(
    tuition: Numeric, students: int, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    tuition_value = kernel.to_decimal(tuition)
    if tuition_value < 0:
        return Result.failure("Tuition cannot be negative", ErrorCode.NEGATIVE_VALUE, field="tuition")
    if students < 0:
        return Result.failure("Students cannot be negative", ErrorCode.NEGATIVE_VALUE, field="students")
    return Result.success(kernel.multiply(tuition_value, students))


@guarded("bucket other revenue")
def bucket_other_revenue(
    items: Sequence[OtherRevenue], kernel: Optional[DecimalKernel] = None
) -> Result[Dict[int, Decimal]]:
    kernel = resolve_kernel(kernel)
    buckets: Dict[int, Decimal] = {}
    for item in items:
        amount = kernel.to_decimal(item.amount)
        if amount < 0:
            return Result.failure(
                f"Other revenue for year {item.year} cannot be negative",
                ErrorCode.NEGATIVE_VALUE,
                field="other_revenue",
            )
        buckets[item.year] = kernel.add(buckets.get(item.year), amount)
    return Result.success(buckets)


@guarded("calculate revenue")
def calculate_revenue(
    tuition_by_year: Sequence[TuitionYear],
    students_by_year: Mapping[int, int],
    other_revenue_by_year: Optional[Mapping[int, Numeric]] = None,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[RevenueYear]]:
    kernel = resolve_kernel(kernel)
    if not tuition_by_year:
        return Result.failure("Tuition data is required", ErrorCode.MISSING_DATA, field="tuition_by_year")
    if not students_by_year:
        return Result.failure("Students data is required", ErrorCode.MISSING_DATA, field="students_by_year")

    other_revenue_by_year = other_revenue_by_year or {}
    rows: List[RevenueYear] = []
    for tuition_row in tuition_by_year:
        students = students_by_year.get(tuition_row.year)
        if students is None:
            return Result.failure(
                f"Students data not found for year {tuition_row.year}",
                ErrorCode.MISSING_DATA,
                field="students_by_year",
            )
        revenue = calculate_revenue_for_year(tuition_row.tuition, students, kernel=kernel)
        if revenue.is_failure:
            return revenue.propagate()

        other = kernel.to_decimal(other_revenue_by_year.get(tuition_row.year, ZERO))
        if other < 0:
            return Result.failure(
                f"Other revenue for year {tuition_row.year} cannot be negative",
                ErrorCode.NEGATIVE_VALUE,
                field="other_revenue",
            )
        rows.append(
            RevenueYear(
                year=tuition_row.year,
                tuition=tuition_row.tuition,
                students=students,
                revenue=revenue.data,
                other_revenue=other,
                total_revenue=kernel.add(revenue.data, other),
            )
        )
    return Result.success(rows)


def calculate_total_revenue(rows: Sequence[RevenueYear], kernel: Optional[DecimalKernel] = None) -> Decimal:
    kernel = resolve_kernel(kernel)
    return kernel.sum(row.total_revenue for row in rows)


def calculate_average_revenue(
    rows: Sequence[RevenueYear], kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    if not rows:
        return Result.failure("No revenue data available", ErrorCode.MISSING_DATA)
    kernel = resolve_kernel(kernel)
    return Result.success(kernel.divide(calculate_total_revenue(rows, kernel), len(rows)))
