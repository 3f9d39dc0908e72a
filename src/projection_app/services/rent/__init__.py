"""Dispatch rent calculations over the rent parameter variants."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from ...core.config import PROJECTION_END_YEAR, PROJECTION_START_YEAR
from ...core.decimals import ZERO, DecimalKernel, Numeric, resolve_kernel
from ...core.logging import get_logger
from ...core.result import ErrorCode, Result
from ...models.rent import (
    FixedEscalationParams,
    PartnerModelParams,
    RentModel,
    RentParams,
    RentPlan,
    RentYear,
    RevenueShareParams,
)
from ..escalation import check_year_range
from .fixed_escalation import (
    calculate_fixed_escalation_rent,
    calculate_fixed_escalation_rent_for_year,
    calculate_fixed_escalation_total_rent,
)
from .partner_model import (
    calculate_partner_model_rent,
    calculate_partner_model_rent_for_year,
    calculate_partner_model_total_rent,
)
from .revenue_share import (
    calculate_revenue_share_rent,
    calculate_revenue_share_rent_for_year,
    calculate_revenue_share_total_rent,
)

logger = get_logger(__name__)


def _unknown_model(params: Any) -> Result:
    model = getattr(params, "model", None) or getattr(params, "rent_model", type(params).__name__)
    return Result.failure(f"Unknown rent model: {model}", ErrorCode.UNKNOWN_RENT_MODEL, field="rent_model")


def calculate_rent(params: RentParams, kernel: Optional[DecimalKernel] = None) -> Result[List[RentYear]]:
    if isinstance(params, FixedEscalationParams):
        return calculate_fixed_escalation_rent(params, kernel=kernel)
    if isinstance(params, RevenueShareParams):
        return calculate_revenue_share_rent(params, kernel=kernel)
    if isinstance(params, PartnerModelParams):
        return calculate_partner_model_rent(params, kernel=kernel)
    return _unknown_model(params)


def calculate_rent_for_year(
    params: RentParams, year: int, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    if isinstance(params, FixedEscalationParams):
        return calculate_fixed_escalation_rent_for_year(params, year, kernel=kernel)
    if isinstance(params, RevenueShareParams):
        revenue = params.revenue_by_year.get(year)
        if revenue is None:
            return Result.failure(
                f"Revenue data not found for year {year}", ErrorCode.MISSING_DATA, field="revenue_by_year"
            )
        return calculate_revenue_share_rent_for_year(revenue, params.revenue_share_percent, kernel=kernel)
    if isinstance(params, PartnerModelParams):
        return calculate_partner_model_rent_for_year(params, year, kernel=kernel)
    return _unknown_model(params)


def calculate_total_rent(params: RentParams, kernel: Optional[DecimalKernel] = None) -> Result[Decimal]:
    if isinstance(params, FixedEscalationParams):
        return calculate_fixed_escalation_total_rent(params, kernel=kernel)
    if isinstance(params, RevenueShareParams):
        return calculate_revenue_share_total_rent(params, kernel=kernel)
    if isinstance(params, PartnerModelParams):
        return calculate_partner_model_total_rent(params, kernel=kernel)
    return _unknown_model(params)


def rent_start_year(params: RentParams) -> int:
    start_year = params.start_year
    return start_year if start_year is not None else PROJECTION_START_YEAR


class _ParameterReader:
    def __init__(self, parameters: Mapping[str, Any], kernel: DecimalKernel):
        self.parameters = parameters
        self.kernel = kernel
        self.error: Optional[Result] = None

    def _fail(self, message: str, name: str) -> None:
        if self.error is None:
            self.error = Result.failure(message, ErrorCode.INVALID_INPUT, field=name)

    def decimal(self, name: str, default: Optional[Numeric] = None, required: bool = True) -> Optional[Decimal]:
        value = self.parameters.get(name)
        if value is None:
            if default is not None:
                return self.kernel.to_decimal(default)
            if required:
                self._fail(f"Rent parameter '{name}' is required", name)
            return None
        try:
            return self.kernel.to_decimal(value)
        except (ArithmeticError, ValueError, TypeError):
            self._fail(f"Rent parameter '{name}' must be a number, got {value!r}", name)
            return None

    def integer(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = self.parameters.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            self._fail(f"Rent parameter '{name}' must be a whole number, got {value!r}", name)
            return None
        try:
            number = self.kernel.to_decimal(value)
        except (ArithmeticError, ValueError, TypeError):
            number = None
        if number is None or number != number.to_integral_value():
            self._fail(f"Rent parameter '{name}' must be a whole number, got {value!r}", name)
            return None
        return int(number)


def build_rent_params(
    plan: RentPlan,
    start_year: int = PROJECTION_START_YEAR,
    end_year: int = PROJECTION_END_YEAR,
    revenue_by_year: Optional[Mapping[int, Numeric]] = None,
    kernel: Optional[DecimalKernel] = None,
) -> Result[RentParams]:
    kernel = resolve_kernel(kernel)
    reader = _ParameterReader(plan.parameters or {}, kernel)
    transition_rent = reader.decimal("transition_rent", default=ZERO)

    params: Any
    if plan.rent_model == RentModel.FIXED_ESCALATION:
        fields: Dict[str, Any] = dict(
            base_rent=reader.decimal("base_rent"),
            escalation_rate=reader.decimal("escalation_rate"),
            frequency=reader.integer("frequency", default=1),
            start_year=reader.integer("start_year", default=start_year),
        )
        if reader.error:
            return reader.error.propagate()
        params = FixedEscalationParams(end_year=end_year, transition_rent=transition_rent, **fields)
    elif plan.rent_model == RentModel.REVENUE_SHARE:
        share = reader.decimal("revenue_share_percent")
        model_start = reader.integer("start_year", default=start_year)
        if reader.error:
            return reader.error.propagate()
        invalid = check_year_range(model_start, end_year)
        if invalid:
            return invalid.propagate()
        revenue = {
            year: kernel.to_decimal(amount)
            for year, amount in (revenue_by_year or {}).items()
            if model_start <= year <= end_year
        }
        params = RevenueShareParams(
            revenue_by_year=revenue, revenue_share_percent=share, transition_rent=transition_rent
        )
    elif plan.rent_model == RentModel.PARTNER_MODEL:
        fields = dict(
            land_size=reader.decimal("land_size"),
            land_price_per_sqm=reader.decimal("land_price_per_sqm"),
            bua_size=reader.decimal("bua_size"),
            construction_cost_per_sqm=reader.decimal("construction_cost_per_sqm"),
            yield_base=reader.decimal("yield_base"),
            growth_rate=reader.decimal("growth_rate", required=False),
            frequency=reader.integer("frequency"),
            start_year=reader.integer("start_year", default=start_year),
        )
        if reader.error:
            return reader.error.propagate()
        params = PartnerModelParams(end_year=end_year, transition_rent=transition_rent, **fields)
    else:
        return _unknown_model(plan)

    if params.transition_rent < 0:
        return Result.failure("Transition rent cannot be negative", ErrorCode.NEGATIVE_VALUE, field="transition_rent")
    logger.debug("rent_params_built", model=plan.rent_model.value)
    return Result.success(params)


__all__ = [
    "build_rent_params",
    "calculate_rent",
    "calculate_rent_for_year",
    "calculate_total_rent",
    "rent_start_year",
]
