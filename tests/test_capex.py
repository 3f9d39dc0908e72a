from __future__ import annotations

from decimal import Decimal

from projection_app.core.decimals import default_kernel
from projection_app.core.result import ErrorCode
from projection_app.models.capex import CapexRule
from projection_app.services.capex import calculate_capex_from_rule, calculate_capex_from_rules


def rule(**overrides) -> CapexRule:
    values = dict(id="building", category="building", cycle_years=20, base_cost=Decimal("5000000"), starting_year=2028)
    values.update(overrides)
    return CapexRule(**values)


def test_reinvestment_repeats_every_cycle_until_the_horizon_ends():
    kernel = default_kernel()
    items = calculate_capex_from_rule(rule(), "0.03").data
    assert [item.year for item in items] == [2028, 2048]
    assert items[0].amount == Decimal("5000000")
    assert items[1].amount == kernel.multiply(5000000, kernel.power("1.03", 20))
    assert kernel.round(items[1].amount, 0) == Decimal("9030556")
    assert {item.rule_id for item in items} == {"building"}


def test_yearly_cycle_covers_every_remaining_year():
    items = calculate_capex_from_rule(rule(cycle_years=1, starting_year=2050), 0).data
    assert [(item.year, item.amount) for item in items] == [
        (2050, Decimal("5000000")),
        (2051, Decimal("5000000")),
        (2052, Decimal("5000000")),
    ]


def test_rule_validation():
    assert calculate_capex_from_rule(rule(base_cost=Decimal(0)), "0.03").code == ErrorCode.INVALID_INPUT
    assert calculate_capex_from_rule(rule(), "-0.01").code == ErrorCode.INVALID_INPUT
    assert calculate_capex_from_rule(rule(cycle_years=0), "0.03").code == ErrorCode.INVALID_FREQUENCY
    assert calculate_capex_from_rule(rule(cycle_years=51), "0.03").code == ErrorCode.INVALID_FREQUENCY
    assert calculate_capex_from_rule(rule(starting_year=2020), "0.03").code == ErrorCode.YEAR_OUT_OF_RANGE
    assert calculate_capex_from_rule(rule(starting_year=2053), "0.03").code == ErrorCode.YEAR_OUT_OF_RANGE


def test_rules_are_merged_by_year_then_category():
    rules = [
        rule(id="tech", category="technology", cycle_years=5, base_cost=Decimal("200000"), starting_year=2030),
        rule(id="furniture", category="furniture", cycle_years=10, base_cost=Decimal("300000"), starting_year=2030),
    ]
    items = calculate_capex_from_rules(rules, "0.02").data
    keys = [(item.year, item.category) for item in items]
    assert keys == sorted(keys)
    assert keys[:2] == [(2030, "furniture"), (2030, "technology")]
    assert len(items) == 5 + 3


def test_first_invalid_rule_fails_the_batch():
    rules = [rule(), rule(id="bad", cycle_years=60)]
    result = calculate_capex_from_rules(rules, "0.03")
    assert result.code == ErrorCode.INVALID_FREQUENCY
    assert result.error.field == "cycle_years"
