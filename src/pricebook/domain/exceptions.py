"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Validation problems found by ``ProductValidator`` are *not* raised; they
are returned as ``ValidationResult`` values. The exceptions below cover
the conditions a caller has to branch on.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class BomStructureError(ValidationError):
    """A save would make a Composite reference another Composite."""


class FormulaSyntaxError(ValidationError):
    """A price formula could not be parsed."""


class SyncRefusedError(ValidationError):
    """A product is not eligible for sync; nothing was sent."""


# --- Persistence --------------------------------------------------------------


class PersistenceError(DomainException):
    """Base class for storage failures."""


class DuplicateKeyError(PersistenceError):
    """A unique constraint (the SKU) was violated at the storage layer."""


class StorageUnavailableError(PersistenceError):
    """The store could not be read or written."""


# --- Transport ----------------------------------------------------------------


class TransportError(DomainException):
    """The external catalog could not be reached or answered with an error."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class NotConnectedError(TransportError):
    """No access token is stored for the external catalog."""


class SessionExpiredError(TransportError):
    """The access token expired and could not be refreshed."""
