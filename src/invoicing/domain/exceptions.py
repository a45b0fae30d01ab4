"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the application layer can translate them uniformly into a failed Result.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input or a violated value invariant."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """A product does not have enough stock for the requested quantity."""


class InvalidStateError(DomainException):
    """The entity's current status forbids the requested operation."""


class ConflictError(DomainException):
    """A unique key (product code, customer email) is already taken."""


class StaleEntityError(ConflictError):
    """The entity was changed by another unit of work since it was loaded."""


class InsufficientHistoryError(DomainException):
    """Not enough purchase history to derive an estimate."""
