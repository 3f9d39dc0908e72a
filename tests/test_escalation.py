from __future__ import annotations

from decimal import Decimal

from projection_app.core.result import ErrorCode
from projection_app.services.escalation import (
    calculate_escalation_series,
    calculate_tuition_growth,
    escalate,
)


def test_escalate_steps_at_period_boundaries():
    values = [escalate(100, "0.1", 2, 2023, year).data for year in range(2023, 2028)]
    assert values == [100, 100, Decimal("110"), Decimal("110"), Decimal("121")]


def test_series_is_constant_within_each_period_and_grows_at_boundaries():
    for frequency in (1, 2, 3):
        result = calculate_escalation_series(50000, "0.03", frequency, 2023, 2023, 2052)
        assert result.is_success
        rows = result.data
        assert len(rows) == 30
        for previous, current in zip(rows, rows[1:]):
            if (current.year - 2023) % frequency == 0:
                assert current.value > previous.value
                assert current.period == previous.period + 1
            else:
                assert current.value == previous.value
                assert current.period == previous.period


def test_zero_rate_keeps_base_value():
    rows = calculate_escalation_series(1000, 0, 1, 2023, 2023, 2030).data
    assert {row.value for row in rows} == {Decimal(1000)}


def test_escalate_validation():
    assert escalate(0, "0.03", 1, 2023, 2024).code == ErrorCode.INVALID_INPUT
    assert escalate(100, "-0.01", 1, 2023, 2024).code == ErrorCode.INVALID_INPUT
    assert escalate(100, "0.03", 4, 2023, 2024).code == ErrorCode.INVALID_FREQUENCY
    assert escalate(100, "0.03", 1, 2025, 2024).code == ErrorCode.INVALID_YEAR_RANGE


def test_series_year_range_validation():
    assert calculate_escalation_series(100, "0.03", 1, 2023, 2030, 2025).code == ErrorCode.INVALID_YEAR_RANGE
    assert calculate_escalation_series(100, "0.03", 1, 2023, 2023, 2053).code == ErrorCode.YEAR_OUT_OF_RANGE
    assert calculate_escalation_series(100, "0.03", 1, 2022, 2022, 2030).code == ErrorCode.YEAR_OUT_OF_RANGE
    assert calculate_escalation_series(100, "0.03", 1, 2026, 2025, 2030).code == ErrorCode.INVALID_YEAR_RANGE


def test_malformed_input_becomes_calculation_error():
    result = escalate("not-a-number", "0.03", 1, 2023, 2024)
    assert result.code == ErrorCode.CALCULATION_ERROR


def test_tuition_growth_reports_cpi_period():
    result = calculate_tuition_growth(50000, "0.03", 2, 2023, 2023, 2026)
    assert result.is_success
    assert [(row.year, row.tuition, row.cpi_period) for row in result.data] == [
        (2023, Decimal("50000"), 0),
        (2024, Decimal("50000"), 0),
        (2025, Decimal("51500"), 1),
        (2026, Decimal("51500"), 1),
    ]
