class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class UnsupportedShiftError(ValidationError):
    """Raised for shifts whose end time-of-day is not after their start (overnight shifts)."""


class ConfigurationError(DomainError):
    """Raised when the ledger salt or a worker setting is missing or invalid.

    Fatal to the whole run: nothing may be written.
    """


class ReferenceNotFoundError(DomainError):
    """Raised when an open record references a shift that does not exist."""


class StoreUnavailableError(DomainError):
    """Raised when a query or batch commit fails against the store."""


class HashComputationError(DomainError):
    """Raised when a ledger digest cannot be computed from a record's values."""
