class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedInputError(ValidationError):
    """Raised when a batch of records does not have the expected shape."""


class DuplicateEventError(ValidationError):
    """Raised when a student has several scans for one session and duplicates are rejected."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""
