from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.decimals import ZERO, DecimalKernel, Numeric, resolve_kernel
from ..core.result import ErrorCode, Result, guarded

DEFAULT_ZAKAT_RATE = Decimal("0.025")
MAX_ZAKAT_RATE = Decimal("0.1")
NISAB_THRESHOLD_SAR = Decimal(21250)


@guarded("validate zakat rate")
def validate_zakat_rate(zakat_rate: Numeric, kernel: Optional[DecimalKernel] = None) -> Result[Decimal]:
    rate = resolve_kernel(kernel).to_decimal(zakat_rate)
    if rate < 0 or rate > MAX_ZAKAT_RATE:
        return Result.failure("Zakat rate must be between 0% and 10%", ErrorCode.INVALID_PERCENTAGE, field="zakat_rate")
    return Result.success(rate)


@guarded("calculate income-based zakat")
def calculate_income_based_zakat(
    net_income: Numeric, zakat_rate: Numeric = DEFAULT_ZAKAT_RATE, kernel: Optional[DecimalKernel] = None
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    rate = validate_zakat_rate(zakat_rate, kernel=kernel)
    if rate.is_failure:
        return rate
    return Result.success(kernel.multiply(kernel.max(ZERO, net_income), rate.data))


@guarded("calculate asset-based zakat")
def calculate_asset_based_zakat(
    cash: Numeric,
    accounts_receivable: Numeric,
    inventory: Numeric = ZERO,
    zakat_rate: Numeric = DEFAULT_ZAKAT_RATE,
    nisab_threshold: Numeric = NISAB_THRESHOLD_SAR,
    kernel: Optional[DecimalKernel] = None,
) -> Result[Decimal]:
    kernel = resolve_kernel(kernel)
    assets = {
        "cash": kernel.to_decimal(cash),
        "accounts_receivable": kernel.to_decimal(accounts_receivable),
        "inventory": kernel.to_decimal(inventory),
    }
    for name, value in assets.items():
        if value < 0:
            label = name.replace("_", " ").capitalize()
            return Result.failure(f"{label} cannot be negative", ErrorCode.NEGATIVE_VALUE, field=name)
    rate = validate_zakat_rate(zakat_rate, kernel=kernel)
    if rate.is_failure:
        return rate
    nisab = kernel.to_decimal(nisab_threshold)
    if nisab < 0:
        return Result.failure("Nisab threshold cannot be negative", ErrorCode.NEGATIVE_VALUE, field="nisab_threshold")

    zakat_base = kernel.sum(assets.values())
    if zakat_base < nisab:
        return Result.success(ZERO)
    return Result.success(kernel.multiply(zakat_base, rate.data))
