from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from ..core.config import MAX_YEAR, MIN_YEAR
from ..core.decimals import HUNDRED, ONE, ZERO, DecimalKernel, Numeric, resolve_kernel
from ..core.logging import get_logger
from ..core.result import ErrorCode, Result, guarded
from ..models.curriculum import CurriculumPlan, StudentsProjection
from ..models.results import StaffCostYear
from .escalation import CPI_FREQUENCIES, check_year_range

logger = get_logger(__name__)

MONTHS_PER_YEAR = 12


@guarded("calculate staff costs")
def calculate_staff_costs(
    base_staff_cost: Numeric,
    cpi_rate: Numeric,
    cpi_frequency: int,
    base_year: int,
    start_year: int,
    end_year: int,
    kernel: Optional[DecimalKernel] = None,
) -> Result[List[StaffCostYear]]:
    kernel = resolve_kernel(kernel)
    invalid = check_year_range(start_year, end_year)
    if invalid:
        return invalid.propagate()

    base = kernel.to_decimal(base_staff_cost)
    rate = kernel.to_decimal(cpi_rate)
    if base <= 0:
        return Result.failure("Base staff cost must be positive", ErrorCode.INVALID_INPUT, field="staff_cost_base")
    if rate < 0:
        return Result.failure("CPI rate cannot be negative", ErrorCode.INVALID_INPUT, field="cpi_rate")
    if cpi_frequency not in CPI_FREQUENCIES:
        return Result.failure(
            "CPI frequency must be 1, 2, or 3 years", ErrorCode.INVALID_FREQUENCY, field="staff_cost_cpi_frequency"
        )

    growth = kernel.add(ONE, rate)
    rows: List[StaffCostYear] = []
    for year in range(start_year, end_year + 1):
        years_from_base = year - base_year
        if years_from_base < 0:
            years_before = -years_from_base
            period = -years_before // cpi_frequency
            staff_cost = kernel.divide(base, kernel.power(growth, years_before))
        else:
            period = years_from_base // cpi_frequency
            staff_cost = kernel.multiply(base, kernel.power(growth, period))
        rows.append(StaffCostYear(year=year, staff_cost=staff_cost, cpi_period=period))
    return Result.success(rows)


def _closest_projection(projection: Sequence[StudentsProjection], base_year: int) -> Optional[StudentsProjection]:
    for entry in projection:
        if entry.year == base_year:
            return entry
    before = [entry for entry in projection if entry.year < base_year]
    after = [entry for entry in projection if entry.year > base_year]
    closest_before = max(before, key=lambda entry: entry.year) if before else None
    closest_after = min(after, key=lambda entry: entry.year) if after else None
    if closest_before and closest_after:
        if base_year - closest_before.year <= closest_after.year - base_year:
            return closest_before
        return closest_after
    return closest_before or closest_after


def _normalize_ratio(ratio: Decimal, label: str, plan: CurriculumPlan, kernel: DecimalKernel) -> Decimal:
    if ratio > ONE:
        logger.warning(
            "staff_ratio_treated_as_percent",
            curriculum=plan.curriculum_type.value,
            ratio_name=label,
            ratio=str(ratio),
        )
        return kernel.divide(ratio, HUNDRED)
    return ratio


@guarded("calculate staff cost base")
def calculate_staff_cost_base_from_curriculum(
    curriculum_plans: Sequence[CurriculumPlan],
    base_year: int,
    kernel: Optional[DecimalKernel] = None,
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    if not curriculum_plans:
        return Result.failure("At least one curriculum plan is required", ErrorCode.MISSING_CURRICULUM_PLAN)
    if base_year < MIN_YEAR or base_year > MAX_YEAR:
        return Result.failure(
            f"Base year must be between {MIN_YEAR} and {MAX_YEAR}",
            ErrorCode.YEAR_OUT_OF_RANGE,
            field="staff_cost_base_year",
        )

    total = ZERO
    for plan in curriculum_plans:
        curriculum = plan.curriculum_type.value
        entry = _closest_projection(plan.students_projection, base_year)
        if entry is None:
            return Result.failure(
                f"Students projection is empty for curriculum {curriculum}",
                ErrorCode.MISSING_DATA,
                field="students_projection",
            )
        if entry.year != base_year:
            logger.warning(
                "staff_cost_base_year_fallback",
                curriculum=curriculum,
                base_year=base_year,
                used_year=entry.year,
                students=entry.students,
            )

        settings = (
            plan.teacher_ratio,
            plan.non_teacher_ratio,
            plan.teacher_monthly_salary,
            plan.non_teacher_monthly_salary,
        )
        if any(value is None for value in settings):
            return Result.failure(
                f"Staff cost configuration incomplete for curriculum {curriculum}. "
                "Please configure teacher ratio, non-teacher ratio, and monthly salaries.",
                ErrorCode.MISSING_DATA,
            )
        teacher_ratio = _normalize_ratio(kernel.to_decimal(plan.teacher_ratio), "teacher_ratio", plan, kernel)
        non_teacher_ratio = _normalize_ratio(
            kernel.to_decimal(plan.non_teacher_ratio), "non_teacher_ratio", plan, kernel
        )
        teacher_salary = kernel.to_decimal(plan.teacher_monthly_salary)
        non_teacher_salary = kernel.to_decimal(plan.non_teacher_monthly_salary)

        for name, value in (
            ("teacher_ratio", teacher_ratio),
            ("non_teacher_ratio", non_teacher_ratio),
            ("teacher_monthly_salary", teacher_salary),
            ("non_teacher_monthly_salary", non_teacher_salary),
        ):
            if value <= 0:
                label = name.replace("_", " ").capitalize()
                return Result.failure(
                    f"{label} must be positive for curriculum {curriculum}", ErrorCode.INVALID_INPUT, field=name
                )

        teachers = kernel.multiply(entry.students, teacher_ratio)
        non_teachers = kernel.multiply(entry.students, non_teacher_ratio)
        teacher_cost = kernel.multiply(kernel.multiply(teachers, teacher_salary), MONTHS_PER_YEAR)
        non_teacher_cost = kernel.multiply(kernel.multiply(non_teachers, non_teacher_salary), MONTHS_PER_YEAR)
        total = kernel.add(total, kernel.add(teacher_cost, non_teacher_cost))

    if total.is_zero():
        return Result.failure(
            "Calculated staff cost is zero. Please check curriculum plan configuration.", ErrorCode.INVALID_INPUT
        )
    logger.debug("staff_cost_base_derived", base_year=base_year, staff_cost_base=str(total))
    return Result.success(total)
