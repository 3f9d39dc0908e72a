from __future__ import annotations

import decimal
import threading
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from typing import Iterable, Optional, Union

from .config import EngineSettings, get_settings

Numeric = Union[Decimal, int, float, str]

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)
MIN_PRECISION = 20


def build_context(precision: int = MIN_PRECISION, rounding: str = decimal.ROUND_HALF_UP) -> decimal.Context:
    if precision < MIN_PRECISION:
        raise ValueError(f"Decimal precision must be at least {MIN_PRECISION} significant digits, got {precision}")
    return decimal.Context(
        prec=precision,
        rounding=rounding,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


@dataclass(frozen=True)
class DecimalKernel:
    precision: int = MIN_PRECISION
    rounding: str = decimal.ROUND_HALF_UP
    _local: threading.local = field(default_factory=threading.local, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        build_context(self.precision, self.rounding)

    @property
    def context(self) -> decimal.Context:
        # contexts are per thread
        context = getattr(self._local, "context", None)
        if context is None:
            context = build_context(self.precision, self.rounding)
            self._local.context = context
        return context

    def to_decimal(self, value: Numeric) -> Decimal:
        if value is None:
            raise TypeError("Cannot convert None to a decimal")
        if isinstance(value, bool):
            raise TypeError("Booleans are not numeric amounts")
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(repr(value))
        elif isinstance(value, str):
            result = Decimal(value.strip())
        else:
            result = Decimal(value)
        if not result.is_finite():
            raise ValueError(f"{value!r} is not a finite number")
        return result

    def _or_zero(self, value: Optional[Numeric]) -> Decimal:
        return ZERO if value is None else self.to_decimal(value)

    def add(self, a: Optional[Numeric], b: Optional[Numeric]) -> Decimal:
        return self.context.add(self._or_zero(a), self._or_zero(b))

    def subtract(self, a: Optional[Numeric], b: Optional[Numeric]) -> Decimal:
        return self.context.subtract(self._or_zero(a), self._or_zero(b))

    def multiply(self, a: Optional[Numeric], b: Optional[Numeric]) -> Decimal:
        return self.context.multiply(self._or_zero(a), self._or_zero(b))

    def divide(self, a: Optional[Numeric], b: Optional[Numeric]) -> Decimal:
        divisor = self._or_zero(b)
        if divisor.is_zero():
            return ZERO
        return self.context.divide(self._or_zero(a), divisor)

    def power(self, base: Numeric, exponent: int) -> Decimal:
        return self.context.power(self.to_decimal(base), exponent)

    def sum(self, values: Iterable[Numeric]) -> Decimal:
        total = ZERO
        for value in values:
            total = self.context.add(total, self.to_decimal(value))
        return total

    def max(self, a: Numeric, b: Numeric) -> Decimal:
        a, b = self.to_decimal(a), self.to_decimal(b)
        return a if a >= b else b

    def min(self, a: Numeric, b: Numeric) -> Decimal:
        a, b = self.to_decimal(a), self.to_decimal(b)
        return a if a <= b else b

    def is_zero(self, value: Numeric, tolerance: Numeric = Decimal("0.01")) -> bool:
        return abs(self.to_decimal(value)) <= self.to_decimal(tolerance)

    def is_positive(self, value: Numeric) -> bool:
        return self.to_decimal(value) > ZERO

    def is_negative(self, value: Numeric) -> bool:
        return self.to_decimal(value) < ZERO

    def round(self, value: Numeric, places: int = 2) -> Decimal:
        exponent = Decimal(1).scaleb(-places)
        return self.to_decimal(value).quantize(exponent, rounding=self.context.rounding, context=self.context)

    def percentage_of(self, value: Numeric, percent: Numeric) -> Decimal:
        return self.divide(self.multiply(value, percent), HUNDRED)

    def percentage_change(self, old_value: Numeric, new_value: Numeric) -> Decimal:
        old = self.to_decimal(old_value)
        if old.is_zero():
            return ZERO
        return self.multiply(self.divide(self.subtract(new_value, old), old), HUNDRED)

    def format_money(self, value: Numeric, currency: str = "SAR") -> str:
        text = f"{self.round(value, 2):,.2f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return f"{text} {currency}"

    def format_money_millions(self, value: Numeric, currency: str = "SAR") -> str:
        millions = self.round(self.divide(value, 1_000_000), 2)
        return f"{millions:.2f}M {currency}"


def build_kernel(precision: int = MIN_PRECISION, rounding: str = decimal.ROUND_HALF_UP) -> DecimalKernel:
    return DecimalKernel(precision, rounding)


def kernel_from_settings(settings: EngineSettings) -> DecimalKernel:
    return build_kernel(settings.decimal_precision, settings.decimal_rounding)


@lru_cache(maxsize=1)
def default_kernel() -> DecimalKernel:
    return kernel_from_settings(get_settings())


def resolve_kernel(kernel: Optional[DecimalKernel]) -> DecimalKernel:
    return kernel if kernel is not None else default_kernel()
