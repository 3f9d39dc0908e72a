from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    NEGATIVE_VALUE = "NEGATIVE_VALUE"
    INVALID_PERCENTAGE = "INVALID_PERCENTAGE"
    INVALID_FREQUENCY = "INVALID_FREQUENCY"
    INVALID_YEAR_RANGE = "INVALID_YEAR_RANGE"
    YEAR_OUT_OF_RANGE = "YEAR_OUT_OF_RANGE"
    MISSING_DATA = "MISSING_DATA"
    MISSING_CURRICULUM_PLAN = "MISSING_CURRICULUM_PLAN"
    MISSING_RENT_PLAN = "MISSING_RENT_PLAN"
    UNKNOWN_RENT_MODEL = "UNKNOWN_RENT_MODEL"
    NO_DATA_IN_RANGE = "NO_DATA_IN_RANGE"
    CALCULATION_ERROR = "CALCULATION_ERROR"


@dataclass(frozen=True)
class CalculationError:
    code: ErrorCode
    message: str
    field: Optional[str] = None
    details: Dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "details": self.details,
        }


T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    is_success: bool
    data: Optional[T] = None
    error: Optional[CalculationError] = None

    @classmethod
    def success(cls, data: T) -> "Result[T]":
        return cls(is_success=True, data=data)

    @classmethod
    def failure(
        cls,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "Result[T]":
        return cls(
            is_success=False,
            error=CalculationError(code=code, message=message, field=field, details=details or {}),
        )

    @classmethod
    def from_error(cls, error: CalculationError) -> "Result[T]":
        return cls(is_success=False, error=error)

    @classmethod
    def from_exception(cls, exception: Exception, operation: str) -> "Result[T]":
        return cls.failure(
            f"Failed to {operation}: {exception}",
            code=ErrorCode.CALCULATION_ERROR,
            details={"exception_type": type(exception).__name__},
        )

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def propagate(self) -> "Result[Any]":
        """Re-type a failure so it can be returned from a caller with a different payload."""
        if self.is_success:
            raise RuntimeError("Cannot propagate a successful result")
        return Result.from_error(self.error)


def guarded(operation: str) -> Callable[[Callable[..., Result[T]]], Callable[..., Result[T]]]:
    """Turn unexpected arithmetic or type faults inside a calculator into failures."""

    def decorator(func: Callable[..., Result[T]]) -> Callable[..., Result[T]]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Result[T]:
            try:
                return func(*args, **kwargs)
            except (ArithmeticError, ValueError, TypeError) as exc:
                logger.error("calculation_fault", operation=operation, error=str(exc), exc_info=True)
                return Result.from_exception(exc, operation)

        return wrapper

    return decorator
