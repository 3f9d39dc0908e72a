from __future__ import annotations

import pytest

from projection_app.core.result import ErrorCode, Result, guarded


def test_failure_carries_code_and_field():
    result = Result.failure("Rent plan is required", ErrorCode.MISSING_RENT_PLAN, field="rent_plan")
    assert result.is_failure
    assert result.code == ErrorCode.MISSING_RENT_PLAN
    assert result.message == "Rent plan is required"
    assert result.error.to_dict() == {
        "code": "MISSING_RENT_PLAN",
        "message": "Rent plan is required",
        "field": "rent_plan",
        "details": {},
    }


def test_success_has_no_error():
    result = Result.success(42)
    assert result.is_success
    assert result.data == 42
    assert result.code is None
    assert result.message is None


def test_propagate_keeps_the_error():
    failure = Result.failure("bad", ErrorCode.INVALID_INPUT)
    propagated = failure.propagate()
    assert propagated.error is failure.error
    with pytest.raises(RuntimeError):
        Result.success(1).propagate()


def test_guarded_turns_arithmetic_faults_into_failures():
    @guarded("divide numbers")
    def divide(a, b):
        return Result.success(a / b)

    result = divide(1, 0)
    assert result.is_failure
    assert result.code == ErrorCode.CALCULATION_ERROR
    assert result.message.startswith("Failed to divide numbers:")
    assert result.error.details["exception_type"] == "ZeroDivisionError"
    assert divide(4, 2).data == 2
