from .decimals import DecimalKernel, Numeric, build_kernel, default_kernel, resolve_kernel
from .result import CalculationError, ErrorCode, Result, guarded

__all__ = [
    "CalculationError",
    "DecimalKernel",
    "ErrorCode",
    "Numeric",
    "Result",
    "build_kernel",
    "default_kernel",
    "guarded",
    "resolve_kernel",
]
