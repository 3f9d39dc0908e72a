from __future__ import annotations

from decimal import Decimal

from projection_app.core.result import ErrorCode
from projection_app.services.ebitda import calculate_ebitda, calculate_ebitda_for_year


def test_ebitda_and_margin():
    ebitda, margin = calculate_ebitda_for_year(10_000_000, 4_000_000, 1_000_000, 1_000_000).data
    assert ebitda == Decimal("4000000")
    assert margin == Decimal("40")


def test_losses_come_from_the_combination_of_costs():
    ebitda, margin = calculate_ebitda_for_year(1_000_000, 900_000, 200_000, 100_000).data
    assert ebitda == Decimal("-200000")
    assert margin == Decimal("-20")


def test_zero_revenue_gives_zero_margin():
    ebitda, margin = calculate_ebitda_for_year(0, 500_000, 0, 0).data
    assert ebitda == Decimal("-500000")
    assert margin == 0


def test_negative_inputs_are_rejected():
    result = calculate_ebitda_for_year(100, 10, -1, 0)
    assert result.code == ErrorCode.NEGATIVE_VALUE
    assert result.error.field == "rent"
    assert result.message == "Rent cannot be negative"
    assert calculate_ebitda_for_year(100, -10, 0, 0).message == "Staff cost cannot be negative"


def test_series_matches_years_across_inputs():
    revenue = {2028: Decimal("10000000"), 2029: Decimal("12000000")}
    staff = {2028: Decimal("4000000"), 2029: Decimal("4120000")}
    rent = {2028: Decimal("1000000"), 2029: Decimal("1040000")}
    opex = {2028: Decimal("1000000"), 2029: Decimal("1100000")}
    rows = calculate_ebitda(revenue, staff, rent, opex).data
    assert [row.year for row in rows] == [2028, 2029]
    for row in rows:
        assert row.ebitda == row.revenue - row.staff_cost - row.rent - row.opex
    assert rows[1].ebitda == Decimal("5740000")


def test_series_validation():
    one_year = {2028: Decimal(1)}
    two_years = {2028: Decimal(1), 2029: Decimal(1)}
    assert calculate_ebitda(two_years, one_year, one_year, one_year).code == ErrorCode.INVALID_INPUT
    assert calculate_ebitda({}, {}, {}, {}).code == ErrorCode.MISSING_DATA
    shifted = {2030: Decimal(1)}
    missing = calculate_ebitda(one_year, one_year, shifted, one_year)
    assert missing.code == ErrorCode.MISSING_DATA
    assert missing.message == "Rent data not found for year 2028"
