"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Failures of the backing store are a separate family (StoreError) because
they are not rule violations: they trigger rollback, not rejection.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidTransitionError(ValidationError):
    """An item decision was requested from a state that does not allow it."""


class ItemLockedError(ValidationError):
    """A quantity edit was attempted on an item that is already decided."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class StoreError(Exception):
    """Base class for failures of the order store."""


class StoreFetchError(StoreError):
    """Orders or items could not be loaded."""


class StoreWriteError(StoreError):
    """A write was not accepted by the store."""
