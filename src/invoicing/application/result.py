"""Tagged result returned by every application handler.

Business rule failures never cross the service boundary as exceptions:
handlers catch DomainException and hand back a failed Result carrying the
message and an ErrorKind the presentation layer can map (NOT_FOUND to
404, CONFLICT to 409, the rest to 400).  Infrastructure errors are not
caught and propagate as they are.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from invoicing.domain.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    InsufficientHistoryError,
    InsufficientStockError,
    InvalidStateError,
    ValidationError,
)

T = TypeVar("T")


class ErrorKind(Enum):
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_STATE = "INVALID_STATE"
    CONFLICT = "CONFLICT"
    INSUFFICIENT_HISTORY = "INSUFFICIENT_HISTORY"


_KIND_BY_EXCEPTION: dict[type[DomainException], ErrorKind] = {
    EntityNotFoundError: ErrorKind.NOT_FOUND,
    ValidationError: ErrorKind.VALIDATION,
    InsufficientStockError: ErrorKind.INSUFFICIENT_STOCK,
    InvalidStateError: ErrorKind.INVALID_STATE,
    ConflictError: ErrorKind.CONFLICT,
    InsufficientHistoryError: ErrorKind.INSUFFICIENT_HISTORY,
}


@dataclass(frozen=True)
class Result(Generic[T]):

    value: T | None = None
    error: str | None = None
    kind: ErrorKind | None = None

    @property
    def is_success(self) -> bool:
        return self.kind is None

    @staticmethod
    def success(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def failure(kind: ErrorKind, message: str) -> Result[T]:
        return Result(error=message, kind=kind)

    @staticmethod
    def from_exception(exc: DomainException) -> Result[T]:
        """Classify a domain exception by the closest mapped base class."""
        for cls in type(exc).__mro__:
            kind = _KIND_BY_EXCEPTION.get(cls)  # type: ignore[arg-type]
            if kind is not None:
                return Result.failure(kind, str(exc))
        return Result.failure(ErrorKind.VALIDATION, str(exc))

    def unwrap(self) -> T:
        """Return the value of a successful result, raise otherwise."""
        if not self.is_success:
            raise ValueError(f"{self.kind.value}: {self.error}")  # type: ignore[union-attr]
        return self.value  # type: ignore[return-value]
