from __future__ import annotations

from decimal import Decimal

from projection_app.core.decimals import build_kernel
from projection_app.core.result import ErrorCode
from projection_app.services.npv import calculate_npv, calculate_present_value

AMOUNTS = {2028: Decimal("5000000"), 2029: Decimal("6000000"), 2030: Decimal("7000000")}


def test_present_value_of_the_first_year():
    kernel = build_kernel()
    pv = calculate_present_value(5_000_000, 2028, "0.08").data
    assert pv.discount_factor == Decimal("1.08")
    assert kernel.round(pv.present_value) == Decimal("4629629.63")


def test_npv_over_three_years():
    result = calculate_npv(AMOUNTS, "0.08")
    assert result.is_success
    npv = result.data
    assert npv.total_years == 3
    assert npv.discount_rate == Decimal("0.08")
    assert abs(npv.npv - Decimal("15330488.24")) < 1


def test_higher_discount_rate_lowers_npv():
    npvs = [calculate_npv(AMOUNTS, rate).data.npv for rate in ("0", "0.05", "0.08", "0.12")]
    assert npvs[0] == Decimal("18000000")
    assert npvs == sorted(npvs, reverse=True)
    assert len(set(npvs)) == 4


def test_missing_years_are_skipped():
    result = calculate_npv({2028: Decimal("5000000"), 2030: Decimal("7000000"), 2060: Decimal(1)}, "0.08")
    assert [pv.year for pv in result.data.present_values] == [2028, 2030]


def test_no_data_in_the_window():
    assert calculate_npv({2024: Decimal("1000000")}, "0.08").code == ErrorCode.NO_DATA_IN_RANGE


def test_npv_validation():
    assert calculate_npv({}, "0.08").code == ErrorCode.MISSING_DATA
    assert calculate_npv(AMOUNTS, "1.5").code == ErrorCode.INVALID_PERCENTAGE
    assert calculate_npv(AMOUNTS, "0.08", start_year=2030, end_year=2029).code == ErrorCode.INVALID_YEAR_RANGE
    assert calculate_npv(AMOUNTS, "0.08", start_year=2026).code == ErrorCode.INVALID_YEAR_RANGE
    assert calculate_npv(AMOUNTS, "0.08", end_year=2053).code == ErrorCode.YEAR_OUT_OF_RANGE
    assert calculate_present_value(1, 2020, "0.08").code == ErrorCode.YEAR_OUT_OF_RANGE
    assert calculate_present_value(1, 2026, "0.08").code == ErrorCode.INVALID_YEAR_RANGE
