from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from ...core.config import MAX_YEAR
from ...core.decimals import ONE, DecimalKernel, resolve_kernel
from ...core.result import ErrorCode, Result, guarded
from ...models.rent import PartnerModelParams, PartnerModelYear
from ..escalation import check_year_range
from .fixed_escalation import check_rent_frequency, escalation_factor

_POSITIVE_FIELDS = (
    ("land_size", "Land size must be positive"),
    ("land_price_per_sqm", "Land price per sqm must be positive"),
    ("bua_size", "BUA size must be positive"),
    ("construction_cost_per_sqm", "Construction cost per sqm must be positive"),
)


def _check_params(params: PartnerModelParams) -> Optional[Result]:
    for name, message in _POSITIVE_FIELDS:
        if getattr(params, name) <= 0:
            return Result.failure(message, ErrorCode.INVALID_INPUT, field=name)
    if params.yield_base <= 0 or params.yield_base > 1:
        return Result.failure(
            "Yield must be between 0 and 1 (0% to 100%)", ErrorCode.INVALID_PERCENTAGE, field="yield_base"
        )
    if params.growth_rate is not None:
        if params.growth_rate < 0 or params.growth_rate > 1:
            return Result.failure(
                "Growth rate must be between 0 and 1 (0% to 100%)", ErrorCode.INVALID_PERCENTAGE, field="growth_rate"
            )
        return check_rent_frequency(_frequency(params))
    return None


def _frequency(params: PartnerModelParams) -> int:
    return params.frequency if params.frequency is not None else 1


def _values(params: PartnerModelParams, kernel: DecimalKernel) -> Tuple[Decimal, Decimal, Decimal]:
    land_value = kernel.multiply(params.land_size, params.land_price_per_sqm)
    construction_value = kernel.multiply(params.bua_size, params.construction_cost_per_sqm)
    return land_value, construction_value, kernel.add(land_value, construction_value)


def _factor(params: PartnerModelParams, year: int, kernel: DecimalKernel) -> Decimal:
    if params.growth_rate is None:
        return ONE
    return escalation_factor(params.growth_rate, _frequency(params), params.start_year, year, kernel)


@guarded("calculate partner model rent")
def calculate_partner_model_base_rent(
    params: PartnerModelParams, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    invalid = _check_params(params)
    if invalid:
        return invalid.propagate()
    _, _, total_value = _values(params, kernel)
    return Result.success(kernel.multiply(total_value, params.yield_base))


@guarded("calculate partner model rent")
def calculate_partner_model_rent_for_year(
    params: PartnerModelParams, year: int, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    base_rent = calculate_partner_model_base_rent(params, kernel=kernel)
    if base_rent.is_failure:
        return base_rent
    if year < params.start_year:
        return Result.failure("Year must be >= start year", ErrorCode.INVALID_YEAR_RANGE, field="year")
    if year > MAX_YEAR:
        return Result.failure(f"Year must be <= {MAX_YEAR}", ErrorCode.YEAR_OUT_OF_RANGE, field="year")
    return Result.success(kernel.multiply(base_rent.data, _factor(params, year, kernel)))


@guarded("calculate partner model rent")
def calculate_partner_model_rent(
    params: PartnerModelParams, kernel: Optional[DecimalKernel] = None
) -> Result[List[PartnerModelYear]]:
    kernel = resolve_kernel(kernel)
    invalid = check_year_range(params.start_year, params.end_year) or _check_params(params)
    if invalid:
        return invalid.propagate()

    land_value, construction_value, total_value = _values(params, kernel)
    base_rent = kernel.multiply(total_value, params.yield_base)
    rows: List[PartnerModelYear] = []
    for year in range(params.start_year, params.end_year + 1):
        rows.append(
            PartnerModelYear(
                year=year,
                land_value=land_value,
                construction_value=construction_value,
                total_value=total_value,
                rent=kernel.multiply(base_rent, _factor(params, year, kernel)),
            )
        )
    return Result.success(rows)


def calculate_partner_model_total_rent(
    params: PartnerModelParams, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    rows = calculate_partner_model_rent(params, kernel=kernel)
    if rows.is_failure:
        return rows.propagate()
    return Result.success(kernel.sum(row.rent for row in rows.data))
