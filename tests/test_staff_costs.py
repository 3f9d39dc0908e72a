from __future__ import annotations

from decimal import Decimal

from projection_app.core.decimals import build_kernel
from projection_app.core.result import ErrorCode
from projection_app.models.curriculum import CurriculumPlan, CurriculumType, StudentsProjection
from projection_app.services.staff_costs import (
    calculate_staff_cost_base_from_curriculum,
    calculate_staff_costs,
)


def plan(projection=None, **overrides) -> CurriculumPlan:
    values = dict(
        curriculum_type=CurriculumType.FR,
        capacity=400,
        tuition_base=Decimal("50000"),
        students_projection=projection or [StudentsProjection(year=2028, students=200)],
        teacher_ratio=Decimal("0.0714"),
        non_teacher_ratio=Decimal("0.0385"),
        teacher_monthly_salary=Decimal("20000"),
        non_teacher_monthly_salary=Decimal("15000"),
    )
    values.update(overrides)
    return CurriculumPlan(**values)


def test_staff_costs_deflate_before_and_escalate_after_the_base_year():
    kernel = build_kernel()
    rows = calculate_staff_costs(1_000_000, "0.03", 1, 2025, 2023, 2026).data
    assert [row.year for row in rows] == [2023, 2024, 2025, 2026]
    assert rows[0].staff_cost == kernel.divide(1_000_000, "1.0609")
    assert rows[1].staff_cost == kernel.divide(1_000_000, "1.03")
    assert rows[2].staff_cost == Decimal("1000000")
    assert rows[3].staff_cost == Decimal("1030000")
    assert [row.cpi_period for row in rows] == [-2, -1, 0, 1]


def test_deflated_periods_round_away_from_the_base_year():
    rows = calculate_staff_costs(1_000_000, "0.03", 2, 2026, 2023, 2028).data
    assert [row.cpi_period for row in rows] == [-2, -1, -1, 0, 0, 1]


def test_staff_cost_validation():
    assert calculate_staff_costs(0, "0.03", 1, 2023, 2023, 2052).code == ErrorCode.INVALID_INPUT
    assert calculate_staff_costs(100, "-0.03", 1, 2023, 2023, 2052).code == ErrorCode.INVALID_INPUT
    assert calculate_staff_costs(100, "0.03", 5, 2023, 2023, 2052).code == ErrorCode.INVALID_FREQUENCY
    assert calculate_staff_costs(100, "0.03", 1, 2023, 2030, 2023).code == ErrorCode.INVALID_YEAR_RANGE


def test_base_cost_from_curriculum_staffing():
    result = calculate_staff_cost_base_from_curriculum([plan()], 2028)
    assert result.data == Decimal("4813200")


def test_ratios_above_one_are_read_as_percentages():
    result = calculate_staff_cost_base_from_curriculum(
        [plan(teacher_ratio=Decimal("7.14"), non_teacher_ratio=Decimal("3.85"))], 2028
    )
    assert result.data == Decimal("4813200")


def test_base_year_falls_back_to_the_closest_earlier_year_on_ties():
    projection = [StudentsProjection(year=2027, students=200), StudentsProjection(year=2029, students=400)]
    assert calculate_staff_cost_base_from_curriculum([plan(projection)], 2028).data == Decimal("4813200")
    later = [StudentsProjection(year=2024, students=100), StudentsProjection(year=2029, students=200)]
    assert calculate_staff_cost_base_from_curriculum([plan(later)], 2028).data == Decimal("4813200")


def test_costs_are_summed_across_curricula():
    ib = plan(curriculum_type=CurriculumType.IB)
    assert calculate_staff_cost_base_from_curriculum([plan(), ib], 2028).data == Decimal("9626400")


def test_staffing_configuration_errors():
    assert calculate_staff_cost_base_from_curriculum([], 2028).code == ErrorCode.MISSING_CURRICULUM_PLAN
    assert calculate_staff_cost_base_from_curriculum([plan()], 2060).code == ErrorCode.YEAR_OUT_OF_RANGE
    assert calculate_staff_cost_base_from_curriculum([plan(teacher_ratio=None)], 2028).code == ErrorCode.MISSING_DATA
    zero_ratio = calculate_staff_cost_base_from_curriculum([plan(non_teacher_ratio=Decimal(0))], 2028)
    assert zero_ratio.error.field == "non_teacher_ratio"
    no_salary = calculate_staff_cost_base_from_curriculum([plan(teacher_monthly_salary=Decimal(0))], 2028)
    assert no_salary.code == ErrorCode.INVALID_INPUT
    empty = plan()
    empty.students_projection = []
    assert calculate_staff_cost_base_from_curriculum([empty], 2028).code == ErrorCode.MISSING_DATA
    no_students = [StudentsProjection(year=2028, students=0)]
    assert calculate_staff_cost_base_from_curriculum([plan(no_students)], 2028).code == ErrorCode.INVALID_INPUT
