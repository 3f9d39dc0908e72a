from __future__ import annotations

from decimal import Decimal

from projection_app.core.result import ErrorCode
from projection_app.services.zakat import (
    calculate_asset_based_zakat,
    calculate_income_based_zakat,
    validate_zakat_rate,
)


def test_income_based_zakat():
    assert calculate_income_based_zakat(10_000_000).data == Decimal("250000")
    assert calculate_income_based_zakat(-5_000_000).data == 0
    assert calculate_income_based_zakat(10_000_000, "0.2").code == ErrorCode.INVALID_PERCENTAGE


def test_asset_based_zakat_above_and_below_nisab():
    assert calculate_asset_based_zakat(15_000_000, 8_000_000).data == Decimal("575000")
    assert calculate_asset_based_zakat(10_000, 5_000).data == 0
    assert calculate_asset_based_zakat(10_000, 5_000, nisab_threshold=0).data == Decimal("375")


def test_asset_based_zakat_validation():
    result = calculate_asset_based_zakat(-1, 0)
    assert result.code == ErrorCode.NEGATIVE_VALUE
    assert result.message == "Cash cannot be negative"
    assert calculate_asset_based_zakat(1, 1, inventory=-1).error.field == "inventory"
    assert calculate_asset_based_zakat(1, 1, nisab_threshold=-1).code == ErrorCode.NEGATIVE_VALUE


def test_zakat_rate_bounds():
    assert validate_zakat_rate("0.1").data == Decimal("0.1")
    assert validate_zakat_rate(0).data == 0
    assert validate_zakat_rate("-0.01").code == ErrorCode.INVALID_PERCENTAGE
    assert calculate_asset_based_zakat(15_000_000, 0, zakat_rate="0.11").error.field == "zakat_rate"
