from __future__ import annotations

from decimal import Decimal

from projection_app.core.result import ErrorCode
from projection_app.models.opex import OpexKind, OpexSubAccount
from projection_app.services.opex import (
    calculate_opex,
    calculate_opex_for_year,
    format_opex_percentage,
    validate_opex_percentage,
)

MARKETING = OpexSubAccount(name="Marketing", is_fixed=False, percent_of_revenue=Decimal("3"))
UTILITIES = OpexSubAccount(name="Utilities", is_fixed=True, fixed_amount=Decimal("200000"))


def test_fixed_and_variable_sub_accounts():
    result = calculate_opex_for_year(50_000_000, [MARKETING, UTILITIES])
    assert result.is_success
    opex = result.data
    assert opex.variable_opex == Decimal("1500000")
    assert opex.fixed_opex == Decimal("200000")
    assert opex.total_opex == Decimal("1700000")
    assert [(line.name, line.kind) for line in opex.breakdown] == [
        ("Marketing", OpexKind.VARIABLE),
        ("Utilities", OpexKind.FIXED),
    ]


def test_percent_is_a_whole_number():
    six_percent = OpexSubAccount(name="Supplies", is_fixed=False, percent_of_revenue=Decimal("6"))
    assert calculate_opex_for_year(50_000_000, [six_percent]).data.total_opex == Decimal("3000000")


def test_fractional_percent_is_flagged_but_applied_as_whole_number():
    fraction = OpexSubAccount(name="Supplies", is_fixed=False, percent_of_revenue=Decimal("0.06"))
    assert calculate_opex_for_year(50_000_000, [fraction]).data.total_opex == Decimal("30000")
    assert validate_opex_percentage("0.06") == "Enter as whole number (e.g., 6 for 6%, not 0.06)"


def test_validate_opex_percentage():
    assert validate_opex_percentage(6) is None
    assert validate_opex_percentage(0) is None
    assert validate_opex_percentage(100) is None
    assert validate_opex_percentage(150) == "Must be between 0 and 100"
    assert validate_opex_percentage(-5) == "Must be between 0 and 100"
    assert validate_opex_percentage("six") == "Invalid number"


def test_format_opex_percentage():
    assert format_opex_percentage(6) == "6.00%"
    assert format_opex_percentage(Decimal("3.5")) == "3.50%"
    assert format_opex_percentage("12.755") == "12.76%"


def test_zero_revenue_leaves_only_fixed_costs():
    opex = calculate_opex_for_year(0, [MARKETING, UTILITIES]).data
    assert opex.variable_opex == 0
    assert opex.total_opex == Decimal("200000")


def test_opex_validation():
    assert calculate_opex_for_year(-1, [MARKETING]).code == ErrorCode.NEGATIVE_VALUE
    too_high = OpexSubAccount(name="Bad", is_fixed=False, percent_of_revenue=Decimal("150"))
    assert calculate_opex_for_year(100, [too_high]).code == ErrorCode.INVALID_PERCENTAGE
    no_amount = OpexSubAccount(name="Rent", is_fixed=True)
    assert calculate_opex_for_year(100, [no_amount]).code == ErrorCode.MISSING_DATA
    no_percent = OpexSubAccount(name="Fees", is_fixed=False)
    assert calculate_opex_for_year(100, [no_percent]).code == ErrorCode.MISSING_DATA
    negative = OpexSubAccount(name="Refund", is_fixed=True, fixed_amount=Decimal("-1"))
    assert calculate_opex_for_year(100, [negative]).code == ErrorCode.NEGATIVE_VALUE


def test_opex_series_is_ordered_by_year():
    result = calculate_opex({2029: Decimal("60000000"), 2028: Decimal("50000000")}, [MARKETING, UTILITIES])
    assert [(row.year, row.total_opex) for row in result.data] == [
        (2028, Decimal("1700000")),
        (2029, Decimal("2000000")),
    ]
    assert calculate_opex({}, [MARKETING]).code == ErrorCode.MISSING_DATA
