"""Unit tests for the tagged Result and its exception classification."""

import pytest

from invoicing.application.result import ErrorKind, Result
from invoicing.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InsufficientHistoryError,
    InsufficientStockError,
    InvalidStateError,
    StaleEntityError,
    ValidationError,
)


class TestResult:

    def test_success(self):
        result = Result.success(5)
        assert result.is_success
        assert result.unwrap() == 5
        assert result.kind is None

    def test_failure(self):
        result = Result.failure(ErrorKind.NOT_FOUND, "missing")
        assert not result.is_success
        assert result.error == "missing"
        with pytest.raises(ValueError, match="NOT_FOUND: missing"):
            result.unwrap()

    def test_success_with_none_value(self):
        assert Result.success(None).is_success

    @pytest.mark.parametrize(
        "exc,kind",
        [
            (EntityNotFoundError("x"), ErrorKind.NOT_FOUND),
            (ValidationError("x"), ErrorKind.VALIDATION),
            (InsufficientStockError("x"), ErrorKind.INSUFFICIENT_STOCK),
            (InvalidStateError("x"), ErrorKind.INVALID_STATE),
            (ConflictError("x"), ErrorKind.CONFLICT),
            (StaleEntityError("x"), ErrorKind.CONFLICT),
            (InsufficientHistoryError("x"), ErrorKind.INSUFFICIENT_HISTORY),
        ],
    )
    def test_from_exception(self, exc, kind):
        result = Result.from_exception(exc)
        assert result.kind == kind
        assert result.error == "x"
